"""Generic HTTP dispatcher for the endpoint table.

This is the only module that issues HTTP requests.  It raises raw
``requests`` exceptions; translating them is the job of ``ApiWrapper``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from loguru import logger

from fabriclink._client.endpoints import get_endpoint
from fabriclink._version import __version__
from fabriclink.exceptions import OperationCancelledError, ResponseDecodeError

if TYPE_CHECKING:
    import requests

    from fabriclink._client.auth import TokenProvider
    from fabriclink._client.context import CallContext

USER_AGENT = f"fabriclink/{__version__}"


class RestTransport:
    """Resolve an endpoint by name, authenticate and send the request.

    Holds no per-call state: the call context travels as an argument, so one
    transport can serve concurrent callers as long as the ``requests``
    session can.
    """

    def __init__(
        self,
        session: requests.Session,
        token_provider: TokenProvider,
        *,
        api_root: str,
        timeout: tuple[float | None, float | None] = (30.0, 30.0),
    ) -> None:
        """Bind the transport to an HTTP session and a token provider."""
        self.session = session
        self.token_provider = token_provider
        self.api_root = api_root if api_root.endswith("/") else api_root + "/"
        self.timeout = timeout

    def build_request(
        self, endpoint_name: str, params: dict[str, str | None]
    ) -> tuple[str, str, dict[str, str]]:
        """Return ``(method, url, query)`` for an endpoint call."""
        endpoint = get_endpoint(endpoint_name)
        path, query = endpoint.bind(params)
        return endpoint.method, self.api_root + path, query

    def call(
        self, endpoint_name: str, ctx: CallContext, **params: str | None
    ) -> Any:  # noqa: ANN401
        """Send the request for *endpoint_name* and return the decoded JSON body.

        Raises ``requests.HTTPError`` for error statuses, other
        ``requests`` exceptions for I/O failures, and
        ``ResponseDecodeError`` when a successful body is not JSON.
        """
        if ctx.cancelled:
            raise OperationCancelledError(f"Call {ctx.operation!r} was cancelled")
        method, url, query = self.build_request(endpoint_name, params)
        token = self.token_provider.get_token(ctx)
        headers = {
            "Authorization": token.header_value(),
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }
        logger.trace(f"{method} {url} params={query}")
        response = self.session.request(
            method,
            url,
            params=query or None,
            headers=headers,
            timeout=self.timeout,
        )
        logger.debug(f"{method} {url} -> HTTP {response.status_code}")
        response.raise_for_status()
        try:
            return response.json()
        except ValueError as e:
            raise ResponseDecodeError(
                response.status_code,
                f"Invalid JSON in response to {endpoint_name}: {e}",
            ) from e
