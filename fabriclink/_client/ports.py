"""Protocols defining the Fabric REST API boundary.

``WorkspaceApiPort`` and ``WarehouseApiPort`` are the seams between
business logic and HTTP.  In production they are satisfied by the REST
adapters in ``rest_adapter.py``; in tests a trivial fake returning fixture
pages can be used instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from fabriclink._client.context import CallContext
    from fabriclink.models import (
        Warehouse,
        WarehousePage,
        Workspace,
        WorkspacePage,
    )


class WorkspaceApiPort(Protocol):
    """Operations on ``v1/workspaces``."""

    def list_workspaces(
        self, ctx: CallContext, continuation_token: str | None = None
    ) -> WorkspacePage:
        """Return the first page, or the page following *continuation_token*."""
        ...

    def get_workspace(self, ctx: CallContext, workspace_id: str) -> Workspace:
        """Return one workspace; raise ``NotFoundError`` if it does not exist."""
        ...


class WarehouseApiPort(Protocol):
    """Operations on ``v1/workspaces/{workspaceId}/warehouses``."""

    def list_warehouses(
        self,
        ctx: CallContext,
        workspace_id: str,
        continuation_token: str | None = None,
    ) -> WarehousePage:
        """Return a page of warehouses of *workspace_id*."""
        ...

    def get_warehouse(
        self, ctx: CallContext, workspace_id: str, warehouse_id: str
    ) -> Warehouse:
        """Return one warehouse; raise ``NotFoundError`` if it does not exist."""
        ...
