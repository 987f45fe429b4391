"""Custom exception hierarchy for fabriclink.

All library-specific exceptions inherit from ``FabricLinkError`` so consumers
can catch ``except FabricLinkError`` to handle any fabriclink failure.
"""

from __future__ import annotations


class FabricLinkError(Exception):
    """Base exception for all fabriclink errors."""


class TransportError(FabricLinkError):
    """Raised when a request could not complete (no response received).

    The underlying ``requests`` / ``OSError`` is chained as ``__cause__``.
    """


class InvalidParameterError(FabricLinkError, ValueError):
    """Raised when a request parameter such as a workspace id is empty."""


class RemoteError(FabricLinkError):
    """Raised when the Fabric REST API responded with an error status."""

    def __init__(
        self,
        status_code: int,
        message: str,
        *,
        error_code: str | None = None,
        request_id: str | None = None,
    ) -> None:
        """Store HTTP status and the decoded error details."""
        self.status_code = status_code
        self.message = message
        self.error_code = error_code
        self.request_id = request_id
        super().__init__(message)


class NotAuthorizedError(RemoteError):
    """HTTP 401: the access token is missing, expired or invalid."""


class ForbiddenError(RemoteError):
    """HTTP 403: the caller has no access to the resource."""


class NotFoundError(RemoteError):
    """HTTP 404: the requested workspace or warehouse does not exist."""


class RateLimitError(RemoteError):
    """HTTP 429: too many requests.

    ``retry_after`` holds the number of seconds from the ``Retry-After``
    response header, or ``None`` when the header is absent or not numeric.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        *,
        retry_after: float | None = None,
        error_code: str | None = None,
        request_id: str | None = None,
    ) -> None:
        """Store the parsed ``Retry-After`` delay alongside the error details."""
        super().__init__(
            status_code, message, error_code=error_code, request_id=request_id
        )
        self.retry_after = retry_after


class ServerError(RemoteError):
    """HTTP 5xx returned by the service."""


class ResponseDecodeError(RemoteError):
    """Raised when a successful response body cannot be decoded into a record."""


class OperationCancelledError(FabricLinkError):
    """Raised when a request is attempted after its call was cancelled."""


class InteractiveModeRequiredError(FabricLinkError):
    """Raised when interactive input is needed but disabled."""


class ConnectionCheckError(FabricLinkError):
    """Raised by ``FabricClient.test_connection`` with a user-facing reason."""
