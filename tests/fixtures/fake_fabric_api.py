"""Fake ``WorkspaceApiPort`` / ``WarehouseApiPort`` backed by in-memory pages.

Used to exercise ``FabricClient`` without HTTP.  Each listing is stored as
a list of pages; page ``i`` is served for continuation token ``t{i-1}``
(``None`` for the first page), and every call is recorded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from fabriclink.exceptions import NotFoundError
from fabriclink.models import Warehouse, WarehousePage, Workspace, WorkspacePage

if TYPE_CHECKING:
    from fabriclink._client.context import CallContext


@dataclass
class RecordedCall:
    """One call into a fake port."""

    method: str
    args: tuple[object, ...]
    operation: str
    active: bool
    interactive: bool


def _token_for(index: int) -> str | None:
    return None if index == 0 else f"t{index - 1}"


def _page_index(token: str | None, pages: int) -> int:
    if token is None:
        return 0
    if not token.startswith("t"):
        msg = f"unexpected continuation token {token!r}"
        raise ValueError(msg)
    index = int(token[1:]) + 1
    if index >= pages:
        msg = f"continuation token {token!r} points past the last page"
        raise ValueError(msg)
    return index


@dataclass
class _Recorder:
    calls: list[RecordedCall] = field(default_factory=list)
    errors: dict[str, BaseException] = field(default_factory=dict)

    def record(self, method: str, ctx: CallContext, *args: object) -> None:
        self.calls.append(
            RecordedCall(
                method=method,
                args=args,
                operation=ctx.operation,
                active=ctx.active,
                interactive=ctx.interactive,
            )
        )
        error = self.errors.get(method)
        if error is not None:
            raise error


class FakeWorkspaceApi:
    """``WorkspaceApiPort`` serving workspaces split into pages.

    ``fail_on_token`` maps a continuation token to an exception raised when
    that token is requested, e.g. to simulate an expired token mid-listing.
    """

    def __init__(
        self,
        pages: list[list[Workspace]],
        *,
        fail_on_token: dict[str, BaseException] | None = None,
    ) -> None:
        """Store pages; an empty *pages* list serves one empty page."""
        self._pages = pages or [[]]
        self._fail_on_token = fail_on_token or {}
        self._recorder = _Recorder()

    @property
    def calls(self) -> list[RecordedCall]:
        """Return all recorded calls in order."""
        return self._recorder.calls

    def fail(self, method: str, error: BaseException) -> None:
        """Make every call of *method* raise *error*."""
        self._recorder.errors[method] = error

    def list_workspaces(
        self, ctx: CallContext, continuation_token: str | None = None
    ) -> WorkspacePage:
        """Return the page for *continuation_token*."""
        self._recorder.record("list_workspaces", ctx, continuation_token)
        if continuation_token in self._fail_on_token:
            raise self._fail_on_token[continuation_token]
        index = _page_index(continuation_token, len(self._pages))
        has_more = index + 1 < len(self._pages)
        return WorkspacePage(
            items=self._pages[index],
            continuation_token=_token_for(index + 1) if has_more else None,
        )

    def get_workspace(self, ctx: CallContext, workspace_id: str) -> Workspace:
        """Return the workspace with *workspace_id* or raise ``NotFoundError``."""
        self._recorder.record("get_workspace", ctx, workspace_id)
        for page in self._pages:
            for w in page:
                if w.id == workspace_id:
                    return w
        raise NotFoundError(404, "The requested workspace was not found")


class FakeWarehouseApi:
    """``WarehouseApiPort`` serving per-workspace warehouse pages."""

    def __init__(self, pages_by_workspace: dict[str, list[list[Warehouse]]]) -> None:
        """Store pages per workspace id."""
        self._pages = pages_by_workspace
        self._recorder = _Recorder()

    @property
    def calls(self) -> list[RecordedCall]:
        """Return all recorded calls in order."""
        return self._recorder.calls

    def fail(self, method: str, error: BaseException) -> None:
        """Make every call of *method* raise *error*."""
        self._recorder.errors[method] = error

    def _workspace_pages(self, workspace_id: str) -> list[list[Warehouse]]:
        if workspace_id not in self._pages:
            raise NotFoundError(404, "The requested workspace was not found")
        return self._pages[workspace_id] or [[]]

    def list_warehouses(
        self,
        ctx: CallContext,
        workspace_id: str,
        continuation_token: str | None = None,
    ) -> WarehousePage:
        """Return the page of *workspace_id* for *continuation_token*."""
        self._recorder.record("list_warehouses", ctx, workspace_id, continuation_token)
        pages = self._workspace_pages(workspace_id)
        index = _page_index(continuation_token, len(pages))
        has_more = index + 1 < len(pages)
        return WarehousePage(
            items=pages[index],
            continuation_token=_token_for(index + 1) if has_more else None,
        )

    def get_warehouse(
        self, ctx: CallContext, workspace_id: str, warehouse_id: str
    ) -> Warehouse:
        """Return one warehouse or raise ``NotFoundError``."""
        self._recorder.record("get_warehouse", ctx, workspace_id, warehouse_id)
        for page in self._workspace_pages(workspace_id):
            for wh in page:
                if wh.id == warehouse_id:
                    return wh
        raise NotFoundError(404, "The requested warehouse was not found")
