from datetime import datetime
from types import SimpleNamespace
from uuid import uuid4

import pytest

from catalog.core.exceptions import ValidationFailed
from catalog.db.models.category import CategoryStatus
from catalog.schemas.categories import CategoryCreate, CategoryResponse, CategoryUpdate
from catalog.schemas.validation import field_errors, validate_payload


def test_create_strips_name_and_normalizes_parent():
    parent = uuid4()
    payload = CategoryCreate(name="  Laptops ", parent_id=str(parent).upper())

    assert payload.name == "Laptops"
    assert payload.parent_id == str(parent)
    assert payload.status is None


@pytest.mark.parametrize("name", ["", "   "])
def test_create_rejects_blank_name(name):
    with pytest.raises(ValidationFailed) as exc_info:
        validate_payload(CategoryCreate, {"name": name})

    assert exc_info.value.errors == [("name", "Category name is required")]


def test_create_rejects_long_name():
    with pytest.raises(ValidationFailed) as exc_info:
        validate_payload(CategoryCreate, {"name": "x" * 101})

    assert [field for field, _ in exc_info.value.errors] == ["name"]


@pytest.mark.parametrize("parent_id", ["", "123", "not-a-uuid", 42])
def test_create_rejects_malformed_parent(parent_id):
    with pytest.raises(ValidationFailed) as exc_info:
        validate_payload(CategoryCreate, {"name": "Phones", "parent_id": parent_id})

    assert exc_info.value.errors == [("parent_id", "Invalid parent ID")]


@pytest.mark.parametrize("status", ["archived", "ACTIVE", ["active"], 1])
def test_status_must_be_known(status):
    with pytest.raises(ValidationFailed) as exc_info:
        validate_payload(CategoryUpdate, {"status": status})

    assert exc_info.value.errors == [("status", "Status must be either active or inactive")]


def test_update_accepts_partial_payloads():
    assert CategoryUpdate().model_dump(exclude_unset=True) == {}
    assert CategoryUpdate(status="inactive").status is CategoryStatus.INACTIVE
    assert CategoryUpdate(name=" Phones ").name == "Phones"


def test_update_rejects_empty_name():
    with pytest.raises(ValidationFailed) as exc_info:
        validate_payload(CategoryUpdate, {"name": " "})

    assert exc_info.value.errors == [("name", "Name cannot be empty")]


def test_validate_payload_passes_models_through():
    payload = CategoryCreate(name="Books")

    assert validate_payload(CategoryCreate, payload) is payload


def test_response_reads_orm_like_objects():
    now = datetime.utcnow()
    record = SimpleNamespace(
        id=uuid4(), name="Books", status="active", parent_id=None, created_at=now, updated_at=now
    )

    response = CategoryResponse.model_validate(record)

    assert response.id == str(record.id)
    assert response.parent_id is None
    assert response.status is CategoryStatus.ACTIVE


def test_field_errors_drops_request_sections():
    errors = [
        {"loc": ("body", "name"), "msg": "Value error, Category name is required"},
        {"loc": ("query", "limit"), "msg": "Input should be a valid integer"},
        {"loc": ("body",), "msg": "Field required"},
    ]

    assert field_errors(errors) == [
        ("name", "Category name is required"),
        ("limit", "Input should be a valid integer"),
        ("body", "Field required"),
    ]


@pytest.mark.parametrize(
    "schema,payload,field",
    [
        (CategoryCreate, {"name": "Phones", "parent": "0f8c6c3e-54c1-4c8f-9a51-7a3b1f0c2a10"}, "parent"),
        (CategoryUpdate, {"parent_id": "0f8c6c3e-54c1-4c8f-9a51-7a3b1f0c2a10"}, "parent_id"),
    ],
)
def test_unknown_keys_are_rejected(schema, payload, field):
    with pytest.raises(ValidationFailed) as exc_info:
        validate_payload(schema, payload)

    assert [name for name, _ in exc_info.value.errors] == [field]
