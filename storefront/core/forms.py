"""
Form submission helpers

Parses JSON submissions into pydantic models and turns every user-correctable
problem into per-field messages sent back with the original submission.
"""

from typing import Any, Optional, TypeVar, Union

from fastapi.responses import JSONResponse
from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# Key for errors that belong to the form rather than a field
FORM_ERROR = ""


class FieldErrors:
    """Ordered per-field error messages"""

    def __init__(self):
        self._errors: dict[str, list[str]] = {}

    def add(self, field: str, message: str) -> None:
        self._errors.setdefault(field, []).append(message)

    def extend(self, other: "FieldErrors") -> None:
        for field, messages in other.as_dict().items():
            for message in messages:
                self.add(field, message)

    def get(self, field: str) -> list[str]:
        return list(self._errors.get(field, []))

    def as_dict(self) -> dict[str, list[str]]:
        return {field: list(messages) for field, messages in self._errors.items()}

    def __bool__(self) -> bool:
        return bool(self._errors)

    def __repr__(self) -> str:
        return f"FieldErrors({self._errors!r})"


def _field_path(loc: tuple, tags: tuple[str, ...]) -> str:
    """('logged-out', 'products', 0, 'documentId') -> 'products[0].documentId'"""
    parts = list(loc)
    if parts and parts[0] in tags:
        parts = parts[1:]

    path = ""
    for part in parts:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path


def errors_from_validation(exc: ValidationError, tags: tuple[str, ...] = ()) -> FieldErrors:
    """
    Convert a pydantic ValidationError to field errors.

    Args:
        exc: The validation failure
        tags: Discriminator values that prefix locations of tagged unions
    """
    errors = FieldErrors()
    for error in exc.errors():
        if error["type"].startswith("union_tag"):
            errors.add("status", error["msg"])
            continue
        errors.add(_field_path(error["loc"], tags) or FORM_ERROR, error["msg"])
    return errors


def parse_submission(
    schema: Union[type[T], TypeAdapter],
    payload: Any,
    tags: tuple[str, ...] = (),
) -> tuple[Optional[T], FieldErrors]:
    """
    Validate a submission.

    Returns:
        Tuple of (parsed value or None, field errors)
    """
    adapter = schema if isinstance(schema, TypeAdapter) else TypeAdapter(schema)
    try:
        return adapter.validate_python(payload), FieldErrors()
    except ValidationError as e:
        return None, errors_from_validation(e, tags)


class SubmissionReply(BaseModel):
    """Failed submission echoed back with its errors"""
    status: str = "error"
    initial_value: Any = None
    error: dict[str, list[str]]

    class Config:
        alias_generator = to_camel
        populate_by_name = True


def reply_with_errors(payload: Any, errors: FieldErrors, status_code: int = 400) -> JSONResponse:
    """Build the error response for a failed submission"""
    reply = SubmissionReply(initial_value=_without_secrets(payload), error=errors.as_dict())
    return JSONResponse(content=reply.model_dump(by_alias=True), status_code=status_code)


_SECRET_FIELDS = {"password", "passwordConfirmation", "currentPassword"}


def _without_secrets(payload: Any) -> Any:
    if isinstance(payload, dict):
        return {k: v for k, v in payload.items() if k not in _SECRET_FIELDS}
    return payload
