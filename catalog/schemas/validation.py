"""
Payload validation shared by services and exception handlers.
"""

from typing import Any, Iterable, List, Mapping, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from catalog.core.exceptions import ValidationFailed

ModelT = TypeVar("ModelT", bound=BaseModel)

_SKIPPED_LOCATIONS = {"body", "query", "path"}


def field_errors(errors: Iterable[Mapping[str, Any]]) -> List[Tuple[str, str]]:
    """
    Flatten pydantic error dicts into ``(field, message)`` pairs.

    The field is the first location part that is not a request section, so
    ``("body", "name")`` becomes ``name``.
    """
    flattened = []
    for err in errors:
        location = [str(part) for part in err.get("loc", ()) if part not in _SKIPPED_LOCATIONS]
        field = location[0] if location else "body"
        message = str(err.get("msg", "Validation error"))
        # pydantic prefixes messages raised from validators
        if message.startswith("Value error, "):
            message = message[len("Value error, ") :]
        flattened.append((field, message))
    return flattened


def validate_payload(schema: Type[ModelT], payload: Union[ModelT, Mapping[str, Any]]) -> ModelT:
    """
    Normalize ``payload`` through ``schema``.

    Already validated models pass through untouched; raw mappings are
    validated and any failure is raised as ``ValidationFailed``.
    """
    if isinstance(payload, schema):
        return payload
    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        raise ValidationFailed(field_errors(e.errors())) from e
