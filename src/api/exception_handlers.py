"""Exception handlers for the API."""

import traceback
import typing as t
from copy import deepcopy

import orjson
import structlog
from django.conf import settings
from django.core.exceptions import ValidationError
from django.http import HttpRequest
from ninja.responses import Response

from common.exceptions import BoxOfficeError

logger = structlog.get_logger(__name__)


def handle_general_exception(request: HttpRequest, exc: Exception | t.Type[Exception]) -> Response:
    """Handle a general exception.

    Args:
        request: The incoming HTTP request.
        exc: The exception.

    Returns:
        The response.
    """
    metadata = {
        "method": request.method,
        "path": request.path,
        "GET": obfuscate(request.GET.dict()),
        # note: we can do request.user because we set the user in the auth flow
        "user": str(request.user) if getattr(request, "user", None) else None,
    }
    if request.method in ("POST", "PUT", "PATCH") and request.headers.get("Content-Type") == "application/json":
        try:
            metadata["json_payload"] = obfuscate(orjson.loads(request.body))
        except (orjson.JSONDecodeError, AttributeError):  # pragma: no cover
            metadata["json_payload"] = None
    logger.exception("INTERNAL_SERVER_ERROR", exc_info=exc, **metadata)
    data = {"detail": "Internal Server Error."}
    is_staff = getattr(request, "user", None) and getattr(request.user, "is_staff", False)
    if settings.DEBUG or is_staff:  # pragma: no cover
        data["traceback"] = traceback.format_exc()
    return Response(status=500, data=data)


def handle_django_validation_error(request: HttpRequest, exc: ValidationError | t.Type[ValidationError]) -> Response:
    """Handle a validation error.

    Args:
        request: The incoming HTTP request.
        exc: The exception.
    """
    if hasattr(exc, "error_dict"):
        error_dict = {k: [ee for e in v for ee in e] for k, v in exc.error_dict.items()}
    else:
        error_dict = {"__all__": list(exc.messages)}  # type: ignore[union-attr]
    logger.info("validation_error", path=request.path, errors=error_dict)
    return Response(status=400, data={"errors": error_dict})


def handle_boxoffice_error(request: HttpRequest, exc: BoxOfficeError | t.Type[BoxOfficeError]) -> Response:
    """Turn a domain error into its HTTP status and a ``{"detail": ...}`` body."""
    assert isinstance(exc, BoxOfficeError)
    logger.info(
        "domain_error",
        error=type(exc).__name__,
        detail=exc.message,
        status_code=exc.status_code,
        path=request.path,
    )
    return Response(status=exc.status_code, data=exc.to_dict())


SENSITIVE_KEYS = {"password", "password1", "password2", "token", "refresh", "access", "account_number"}


def obfuscate(data: t.Any) -> t.Any:
    """Obfuscate sensitive data in payloads."""
    if not isinstance(data, dict):
        return data
    new_data = deepcopy(data)
    for key in data.keys():
        if key.lower() in SENSITIVE_KEYS:
            new_data[key] = "********"
    return new_data
