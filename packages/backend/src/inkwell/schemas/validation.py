"""Deferred body validation.

Learn: Mutation routes take the raw JSON body and validate it only after
the resource has been fetched and ownership confirmed, so a malformed
body sent to someone else's post is still 403 (or 404), never 400.
"""

from typing import Any, Iterable, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from inkwell.errors import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def describe_errors(errors: Iterable[dict], skip: int = 0) -> str:
    """Flatten pydantic error dicts into "field: message; ..." text.

    skip drops leading loc segments ("body", "path", ...) added by FastAPI.
    """
    parts = []
    for err in errors:
        field = ".".join(str(p) for p in err.get("loc", ())[skip:])
        parts.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return "; ".join(parts)


def parse_body(model: type[ModelT], payload: Any) -> ModelT:
    """Validate a raw JSON body, raising a 400 ValidationError on failure."""
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid input: {describe_errors(e.errors())}") from e
