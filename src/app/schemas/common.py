"""Shared schema base and field helpers."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for API schemas: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(ApiModel):
    message: str


def blank_to_none(value: Any) -> Any:
    """Treat empty strings from form-style clients as missing."""
    if isinstance(value, str) and not value.strip():
        return None
    return value
