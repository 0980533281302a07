"""
Prometheus metrics for the HTTP layer and the category store.
"""

import re
import time
from functools import wraps
from typing import Any, Callable, TypeVar, cast

from fastapi import FastAPI, Request, Response
from loguru import logger
from prometheus_client import REGISTRY, Counter, Gauge, Histogram, Summary
from prometheus_client.openmetrics.exposition import (
    CONTENT_TYPE_LATEST,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

F = TypeVar("F", bound=Callable[..., Any])

REQUEST_COUNT = Counter("http_requests_total", "Total HTTP requests count", ["method", "endpoint", "status_code"])

REQUEST_TIME = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, float("inf")),
)

REQUEST_IN_PROGRESS = Gauge("http_requests_in_progress", "Number of HTTP requests in progress", ["method", "endpoint"])

EXCEPTION_COUNT = Counter(
    "http_exceptions_total", "Total HTTP exceptions count", ["method", "endpoint", "exception_type"]
)

DB_QUERY_TIME = Summary("db_query_duration_seconds", "Database query duration in seconds", ["query_type", "table"])

CATEGORY_EVENTS = Counter("category_events_total", "Category lifecycle events", ["event"])

# Rows touched by a single cascade or reparent statement
CATEGORY_BULK_ROWS = Histogram(
    "category_bulk_write_rows",
    "Rows changed by one bulk category update",
    ["operation"],
    buckets=(0, 1, 5, 10, 50, 100, 500, 1000, float("inf")),
)

# Paths that are not worth a time series of their own
UNTRACKED_PATHS = {"/metrics", "/api/health", "/api/health/ready"}

_ID_SEGMENT = re.compile(r"/(?:[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}|\d+)(?=/|$)")


def normalize_path(path: str) -> str:
    """Replace identifier segments with ``{id}`` so every category shares one label."""
    return _ID_SEGMENT.sub("/{id}", path)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """
    Count and time requests per method and normalized path.
    """

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)

    async def dispatch(self, request: Request, call_next: Callable[[Request], Any]) -> Response:
        if request.url.path in UNTRACKED_PATHS:
            return cast(Response, await call_next(request))

        method = request.method
        endpoint = normalize_path(request.url.path)
        start_time = time.time()
        REQUEST_IN_PROGRESS.labels(method=method, endpoint=endpoint).inc()

        try:
            response = cast(Response, await call_next(request))
        except Exception as e:
            EXCEPTION_COUNT.labels(method=method, endpoint=endpoint, exception_type=type(e).__name__).inc()
            logger.exception(f"Request to {endpoint} failed: {e}")
            raise
        else:
            REQUEST_COUNT.labels(method=method, endpoint=endpoint, status_code=response.status_code).inc()
            REQUEST_TIME.labels(method=method, endpoint=endpoint).observe(time.time() - start_time)
            return response
        finally:
            REQUEST_IN_PROGRESS.labels(method=method, endpoint=endpoint).dec()


async def metrics_endpoint(request: Request) -> Response:
    """Expose the default registry in OpenMetrics format."""
    return Response(content=generate_latest(REGISTRY), headers={"Content-Type": CONTENT_TYPE_LATEST})


def setup_metrics(app: FastAPI) -> None:
    app.add_middleware(PrometheusMiddleware)
    app.add_route("/metrics", metrics_endpoint)

    logger.info("Prometheus metrics configured")


def record_category_event(event: str) -> None:
    """
    Count a category lifecycle event.

    Args:
        event: Event name such as ``created`` or ``cascade_inactive``
    """
    CATEGORY_EVENTS.labels(event=event).inc()


def observe_bulk_write(operation: str, rows: int) -> None:
    """Record how many categories one bulk statement changed."""
    CATEGORY_BULK_ROWS.labels(operation=operation).observe(rows)


def time_db_query(query_type: str, table: str = "categories") -> Callable[[F], F]:
    """
    Decorator timing an async store call, failed calls included.

    Args:
        query_type: Label for the kind of statement, such as ``select``
        table: The table the call works on

    Returns:
        A decorator that records into ``db_query_duration_seconds``
    """

    def decorator(func: F) -> F:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            start_time = time.time()
            try:
                return await func(*args, **kwargs)
            finally:
                DB_QUERY_TIME.labels(query_type=query_type, table=table).observe(time.time() - start_time)

        return cast(F, wrapper)

    return decorator
