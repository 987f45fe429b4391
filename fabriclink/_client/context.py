"""Per-call context passed explicitly through every API operation."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


class Interaction(Enum):
    """Whether a call may block on user input (e.g. a credential prompt)."""

    INTERACTIVE = "interactive"
    NON_INTERACTIVE = "non_interactive"


class CancellationToken:
    """Cooperative cancellation flag shared between a caller and its calls."""

    def __init__(self) -> None:
        """Create an uncancelled token."""
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation; already running requests are not interrupted."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """Return True once :meth:`cancel` was called."""
        return self._event.is_set()


@dataclass
class CallContext:
    """Context of a single invocation.

    Created by :func:`call_scope` for exactly one call and never shared
    between calls, so concurrent invocations cannot observe each other's
    state.
    """

    operation: str
    interaction: Interaction = Interaction.NON_INTERACTIVE
    cancel: CancellationToken | None = None
    active: bool = field(default=False, init=False)

    @property
    def interactive(self) -> bool:
        """Return True when prompting the user is allowed for this call."""
        return self.active and self.interaction is Interaction.INTERACTIVE

    @property
    def cancelled(self) -> bool:
        """Return True when the caller cancelled this call."""
        return self.cancel is not None and self.cancel.cancelled


@contextmanager
def call_scope(
    operation: str,
    *,
    interaction: Interaction = Interaction.NON_INTERACTIVE,
    cancel: CancellationToken | None = None,
) -> Iterator[CallContext]:
    """Yield an active :class:`CallContext`; deactivate it on every exit path."""
    ctx = CallContext(operation=operation, interaction=interaction, cancel=cancel)
    ctx.active = True
    try:
        yield ctx
    finally:
        ctx.active = False
