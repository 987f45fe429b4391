"""Single choke point for calls into an API port.

``ApiWrapper.invoke`` gives every call its own :class:`CallContext` (with
interactive prompts suppressed unless asked otherwise) and turns transport
failures into fabriclink exceptions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Generic, TypeVar

from loguru import logger

from fabriclink._client.context import CancellationToken, Interaction, call_scope
from fabriclink._client.errors import translate_exception

if TYPE_CHECKING:
    from collections.abc import Callable

    from fabriclink._client.context import CallContext

_A = TypeVar("_A")
_R = TypeVar("_R")


class ApiWrapper(Generic[_A]):
    """Wrap an API port so that all calls go through :meth:`invoke`.

    The wrapper keeps only the wrapped port and its name; per-call state
    lives in the :class:`CallContext` created by each :meth:`invoke`, so an
    instance can be shared between threads.
    """

    def __init__(self, api: _A, name: str) -> None:
        """Wrap *api*; *name* is used in log messages."""
        self.api = api
        self.name = name

    def invoke(
        self,
        operation: Callable[[CallContext], _R],
        *,
        label: str | None = None,
        interaction: Interaction = Interaction.NON_INTERACTIVE,
        cancel: CancellationToken | None = None,
    ) -> _R:
        """Run *operation* with a fresh call context and translate its errors.

        The result is returned unchanged.  I/O failures become
        ``TransportError`` (original exception chained), error responses
        become ``RemoteError`` subclasses.  Other exceptions propagate as is.
        """
        op_name = f"{self.name}.{label}" if label else self.name
        with call_scope(op_name, interaction=interaction, cancel=cancel) as ctx:
            try:
                return operation(ctx)
            except Exception as e:
                translated = translate_exception(e)
                if translated is None or translated is e:
                    raise
                logger.debug(f"{op_name} failed: {translated!r}")
                raise translated from e
