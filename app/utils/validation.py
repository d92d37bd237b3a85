"""
Request validation utilities

Every entity has a creatable and an updatable Pydantic model (see
``app.models``). The helpers here turn those models into pure
validate-for-create / validate-for-update functions that either return the
validated record keyed by storage column names or raise
``PayloadValidationError`` listing every offending field.
"""

import re
from typing import Any, ClassVar, Dict, Iterable, List, Mapping, Type

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")

# Location prefixes FastAPI adds to request errors
_LOCATION_ROOTS = {"body", "path", "query", "header", "cookie"}


def camel_to_snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


class FieldError:
    """Validation error structure"""
    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message}

    def __repr__(self) -> str:
        return f"FieldError({self.field!r}, {self.message!r})"


class PayloadValidationError(Exception):
    """Raised when a payload violates its schema; carries all field errors."""

    def __init__(self, errors: List[FieldError]):
        self.errors = errors
        super().__init__(summarize(errors))


class ApiModel(BaseModel):
    """Base for request bodies.

    Attribute names are the camelCase names clients send; ``to_columns``
    maps them onto ORM column names. ``column_aliases`` covers the names
    that do not follow the plain camel → snake rule.
    """

    model_config = ConfigDict(extra="ignore")

    column_aliases: ClassVar[Dict[str, str]] = {}

    def to_columns(self, partial: bool = False) -> Dict[str, Any]:
        data = self.model_dump(exclude_unset=partial)
        return {
            self.column_aliases.get(key, camel_to_snake(key)): value
            for key, value in data.items()
        }


def reject_null(value: Any) -> Any:
    """Used by update models for columns that may be omitted but not nulled."""
    if value is None:
        raise ValueError("may not be null")
    return value


def _field_name(loc: Iterable[Any]) -> str:
    parts = [str(p) for p in loc]
    if parts and parts[0] in _LOCATION_ROOTS:
        parts = parts[1:]
    return ".".join(parts) or "body"


def _clean_message(message: str) -> str:
    # Pydantic prefixes errors raised from validators with "Value error, "
    return message.removeprefix("Value error, ")


def field_errors(errors: Iterable[Mapping[str, Any]]) -> List[FieldError]:
    """Convert Pydantic/FastAPI error dicts into FieldErrors."""
    return [
        FieldError(_field_name(err.get("loc", ())), _clean_message(err.get("msg", "Invalid value")))
        for err in errors
    ]


def summarize(errors: List[FieldError]) -> str:
    if not errors:
        return "Validation failed"
    joined = "; ".join(f"{e.field}: {e.message}" for e in errors)
    return f"Validation error: {joined}"


def _validate(schema: Type[ApiModel], raw: Any) -> ApiModel:
    try:
        return schema.model_validate(raw if raw is not None else {})
    except PydanticValidationError as exc:
        raise PayloadValidationError(field_errors(exc.errors())) from exc


def validate_for_create(schema: Type[ApiModel], raw: Any) -> Dict[str, Any]:
    """Validate a create payload; defaults are filled in for omitted fields."""
    return _validate(schema, raw).to_columns()


def validate_for_update(schema: Type[ApiModel], raw: Any) -> Dict[str, Any]:
    """Validate a partial payload. Only supplied fields are returned, so an
    empty payload yields an empty (no-op) update."""
    return _validate(schema, raw).to_columns(partial=True)
