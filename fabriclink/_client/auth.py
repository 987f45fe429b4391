"""Access token providers used by the REST transport.

Token acquisition and refresh belong to the caller's identity stack; these
providers only hand out a bearer token for each call and decide whether a
prompt is allowed for that call.
"""

from __future__ import annotations

import getpass
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from loguru import logger

from fabriclink.config import require_interactive
from fabriclink.exceptions import InteractiveModeRequiredError

if TYPE_CHECKING:
    from fabriclink._client.context import CallContext

FABRIC_SCOPE = "https://api.fabric.microsoft.com/.default"
"""OAuth scope a Fabric access token must be issued for."""


@dataclass(frozen=True, slots=True)
class AccessToken:
    """Bearer token plus its type (used as the ``Authorization`` scheme)."""

    token: str
    token_type: str = "Bearer"

    def header_value(self) -> str:
        """Return the value for the ``Authorization`` header."""
        return f"{self.token_type} {self.token}"

    def __repr__(self) -> str:
        """Hide the secret in logs and tracebacks."""
        return f"AccessToken(token_type={self.token_type!r}, token=***)"


class TokenProvider(Protocol):
    """Supplies a token for each call, prompting only when *ctx* allows it."""

    def get_token(self, ctx: CallContext) -> AccessToken:
        """Return a valid access token for the call described by *ctx*."""
        ...


class StaticTokenProvider:
    """Provider returning a fixed token (from config, env or the caller)."""

    def __init__(self, token: str, token_type: str = "Bearer") -> None:
        """Store the token."""
        if not token:
            msg = "StaticTokenProvider requires a non-empty token"
            raise ValueError(msg)
        self._token = AccessToken(token=token, token_type=token_type)

    def get_token(self, ctx: CallContext) -> AccessToken:  # noqa: ARG002
        """Return the configured token."""
        return self._token


class PromptTokenProvider:
    """Provider that asks the user for a token once and remembers it.

    Prompting happens only for calls whose context is interactive; other
    calls raise ``InteractiveModeRequiredError`` while no token is known.
    """

    def __init__(self, token: str | None = None, token_type: str = "Bearer") -> None:
        """Optionally seed the provider with an already known token."""
        self._token_type = token_type
        self._token = AccessToken(token, token_type) if token else None
        self._lock = threading.Lock()

    def get_token(self, ctx: CallContext) -> AccessToken:
        """Return the remembered token, prompting for it if allowed."""
        with self._lock:
            if self._token is not None:
                return self._token
            if not ctx.interactive:
                raise InteractiveModeRequiredError(
                    f"No Fabric access token available for {ctx.operation!r} "
                    "and interactive prompts are suppressed for this call. "
                    "Set FABRIC_TOKEN or authenticate first."
                )
            require_interactive("Set FABRIC_TOKEN or fabric.token in the config.")
            logger.info("Токен доступа Fabric не указан.")
            raw = getpass.getpass("Токен доступа Fabric: ").strip()
            if not raw:
                raise InteractiveModeRequiredError("No Fabric access token entered.")
            self._token = AccessToken(raw, self._token_type)
            return self._token
