"""
Error envelopes shared by every endpoint.

Validation failures render as:

    422 {"message": "Validation failed", "errors": {"name": ["..."]}}

Any other `HTTPException` renders as `{"message": detail}`, or the detail
itself when a service already built a dict payload.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Type, TypeVar

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

ModelT = TypeVar("ModelT", bound=BaseModel)

_LOCATION_ROOTS = {"body", "query", "path", "header", "form"}


class ValidationFailed(Exception):
    """
    Field-keyed validation failure raised by services before any mutation.
    """

    def __init__(self, errors: Mapping[str, list[str]], message: str = "Validation failed") -> None:
        super().__init__(message)
        self.message = message
        self.errors = {field: list(messages) for field, messages in errors.items()}

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationFailed":
        return cls({field: [message]})


def _field_name(loc: Iterable[Any]) -> str:
    parts = [str(p) for p in loc]
    if parts and parts[0] in _LOCATION_ROOTS:
        parts = parts[1:]
    return ".".join(parts) or "body"


def _humanize_field(field: str) -> str:
    return field.rsplit(".", 1)[-1].replace("_", " ")


def _is_missing(err: Mapping[str, Any]) -> bool:
    if err.get("type") == "missing":
        return True
    # A string left empty after whitespace stripping.
    return err.get("type") == "string_too_short" and (err.get("ctx") or {}).get("min_length") == 1


def field_errors(errors: Iterable[Mapping[str, Any]]) -> dict[str, list[str]]:
    """
    Convert pydantic/FastAPI error entries into a `{field: [messages]}` map.
    """
    result: dict[str, list[str]] = {}
    for err in errors:
        field = _field_name(err.get("loc", ()))
        if _is_missing(err):
            message = f"The {_humanize_field(field)} field is required."
        else:
            message = str(err.get("msg") or "Invalid value.")
            # pydantic prefixes custom ValueError messages.
            message = message.removeprefix("Value error, ")
        result.setdefault(field, []).append(message)
    return result


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_payload(
    model: Type[ModelT],
    data: Mapping[str, Any],
    *,
    extra_errors: Mapping[str, list[str]] | None = None,
) -> ModelT:
    """
    Validate form data against a pydantic model, raising `ValidationFailed`.

    Blank strings count as missing, so a submitted-but-empty form field
    reports "required" rather than a type error. `extra_errors` (e.g. a
    missing upload) are reported together with the model's own errors.
    """
    cleaned = {key: value for key, value in data.items() if not _is_blank(value)}
    extra = {field: list(messages) for field, messages in (extra_errors or {}).items()}
    try:
        payload = model.model_validate(cleaned)
    except ValidationError as exc:
        errors = field_errors(exc.errors())
        for field, messages in extra.items():
            errors.setdefault(field, []).extend(messages)
        raise ValidationFailed(errors) from exc

    if extra:
        raise ValidationFailed(extra)
    return payload


def _validation_response(errors: dict[str, list[str]], message: str = "Validation failed") -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"message": message, "errors": errors},
    )


async def _handle_validation_failed(_: Request, exc: ValidationFailed) -> JSONResponse:
    return _validation_response(exc.errors, exc.message)


async def _handle_request_validation(_: Request, exc: RequestValidationError) -> JSONResponse:
    return _validation_response(field_errors(exc.errors()))


async def _handle_http_exception(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"message": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


def install_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationFailed, _handle_validation_failed)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)
