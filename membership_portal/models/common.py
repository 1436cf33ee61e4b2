"""Shared model configuration and request parsing"""

from typing import List, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from membership_portal.errors import ValidationFailed

ModelT = TypeVar("ModelT", bound=BaseModel)


class CamelModel(BaseModel):
    """Base model speaking camelCase on the wire and snake_case in Python"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RequestModel(CamelModel):
    """Base for request bodies: unknown fields are rejected"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


def format_validation_errors(errors: list) -> List[str]:
    """Flatten pydantic error dicts into "field: message" strings"""
    messages = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        msg = error.get("msg", "Invalid value")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        messages.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return messages


def parse_request(model: Type[ModelT], data) -> ModelT:
    """Validate a payload against a request model, raising ValidationFailed"""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ValidationFailed(errors=format_validation_errors(e.errors()))
