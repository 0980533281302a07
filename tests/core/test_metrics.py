from typing import Dict
from uuid import uuid4

import pytest
from httpx import AsyncClient
from prometheus_client import REGISTRY

from catalog.core.metrics import normalize_path, observe_bulk_write, record_category_event, time_db_query


def _sample(name: str, labels: Dict[str, str]) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


def test_normalize_path_replaces_identifiers():
    category_id = uuid4()

    assert normalize_path(f"/api/category/{category_id}") == "/api/category/{id}"
    assert normalize_path("/api/items/42/children") == "/api/items/{id}/children"
    assert normalize_path("/api/category") == "/api/category"
    assert normalize_path("/api/v1") == "/api/v1"


def test_record_category_event_increments_counter():
    labels = {"event": "renamed_in_test"}
    before = _sample("category_events_total", labels)

    record_category_event("renamed_in_test")

    assert _sample("category_events_total", labels) == before + 1


def test_observe_bulk_write_tracks_rows():
    labels = {"operation": "test_reparent"}
    before = _sample("category_bulk_write_rows_sum", labels)

    observe_bulk_write("test_reparent", 3)

    assert _sample("category_bulk_write_rows_sum", labels) == before + 3


@pytest.mark.asyncio
async def test_time_db_query_observes_failures_too():
    labels = {"query_type": "test_failure", "table": "categories"}
    before = _sample("db_query_duration_seconds_count", labels)

    @time_db_query("test_failure")
    async def broken() -> None:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        await broken()

    assert broken.__name__ == "broken"
    assert _sample("db_query_duration_seconds_count", labels) == before + 1


@pytest.mark.asyncio
async def test_metrics_endpoint_groups_category_ids(client: AsyncClient, auth_headers: Dict[str, str]) -> None:
    await client.delete(f"/api/category/{uuid4()}", headers=auth_headers)

    response = await client.get("/metrics")

    assert response.status_code == 200
    assert 'endpoint="/api/category/{id}"' in response.text
    assert 'endpoint="/metrics"' not in response.text
