"""Translation of ``requests`` failures into fabriclink exceptions."""

from __future__ import annotations

from http import HTTPStatus
from typing import TYPE_CHECKING

import requests
from loguru import logger
from pydantic import ValidationError

from fabriclink.exceptions import (
    FabricLinkError,
    ForbiddenError,
    NotAuthorizedError,
    NotFoundError,
    RateLimitError,
    RemoteError,
    ServerError,
    TransportError,
)
from fabriclink.models import ErrorBody

if TYPE_CHECKING:
    from collections.abc import Mapping

_AUTH_DEFAULT = "Invalid or missing authentication data"
_NOT_FOUND_DEFAULT = "Resource not found"
_RATE_LIMIT_DEFAULT = (
    "Maximum number of requests per seconds has been exceeded, "
    "please try again later."
)

_HTTP_5XX_MIN = 500
_HTTP_5XX_MAX = 600


def parse_retry_after(value: str | None) -> float | None:
    """Parse a ``Retry-After`` header holding delay seconds.

    HTTP-date values and garbage yield None.
    """
    if value is None:
        return None
    try:
        seconds = int(value.strip())
    except ValueError:
        return None
    return float(max(seconds, 0))


def _extract_error_detail(response: requests.Response) -> ErrorBody:
    """Best-effort decode of an error body; never raises.

    JSON bodies are parsed as :class:`ErrorBody`, text bodies become the
    message, everything else (or a decode failure) gives an empty body.
    """
    content_type = (response.headers.get("Content-Type") or "").lower()
    try:
        if "json" in content_type:
            data = response.json()
            if not isinstance(data, dict):
                return ErrorBody()
            body = ErrorBody.model_validate(data)
            if not body.format_message() and response.reason:
                return body.model_copy(update={"message": response.reason})
            return body
        if "text" in content_type:
            return ErrorBody(message=response.text.strip() or None)
    except (ValueError, ValidationError) as e:
        # requests' JSONDecodeError and UnicodeDecodeError are ValueErrors.
        logger.debug(f"Could not decode error body (HTTP {response.status_code}): {e}")
    return ErrorBody()


def error_from_response(response: requests.Response) -> RemoteError:
    """Map an error response to the matching :class:`RemoteError` subclass."""
    status = response.status_code
    body = _extract_error_detail(response)
    detail = body.format_message()
    extra: Mapping[str, str | None] = {
        "error_code": body.error_code,
        "request_id": body.request_id,
    }
    logger.trace(
        f"Fabric error response: HTTP {status}, detail={detail!r}, "
        f"request_id={body.request_id}"
    )

    if status == HTTPStatus.UNAUTHORIZED:
        return NotAuthorizedError(status, detail or _AUTH_DEFAULT, **extra)
    if status == HTTPStatus.FORBIDDEN:
        return ForbiddenError(status, detail or _AUTH_DEFAULT, **extra)
    if status == HTTPStatus.NOT_FOUND:
        return NotFoundError(status, detail or _NOT_FOUND_DEFAULT, **extra)
    if status == HTTPStatus.TOO_MANY_REQUESTS:
        return RateLimitError(
            status,
            detail or _RATE_LIMIT_DEFAULT,
            retry_after=parse_retry_after(response.headers.get("Retry-After")),
            **extra,
        )
    message = f"Server error: {detail or status}"
    if _HTTP_5XX_MIN <= status < _HTTP_5XX_MAX:
        return ServerError(status, message, **extra)
    return RemoteError(status, message, **extra)


def translate_exception(exc: BaseException) -> FabricLinkError | None:
    """Return the fabriclink error for a transport-level *exc*.

    Returns None for exceptions that are not I/O related and must
    propagate unchanged.
    """
    if isinstance(exc, FabricLinkError):
        return exc
    if isinstance(exc, requests.HTTPError) and exc.response is not None:
        return error_from_response(exc.response)
    if isinstance(exc, requests.Timeout):
        return TransportError(f"Request timed out: {exc}")
    if isinstance(exc, requests.ConnectionError):
        return TransportError(f"Could not connect: {exc}")
    if isinstance(exc, (requests.RequestException, OSError)):
        return TransportError(f"Request failed: {exc}")
    return None
