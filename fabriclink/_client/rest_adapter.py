"""REST adapters implementing ``WorkspaceApiPort`` and ``WarehouseApiPort``.

They call the endpoint table through ``RestTransport`` and convert the
decoded JSON into the pydantic records from :mod:`fabriclink.models`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

from fabriclink.exceptions import ResponseDecodeError
from fabriclink.models import Warehouse, WarehousePage, Workspace, WorkspacePage

if TYPE_CHECKING:
    from fabriclink._client.context import CallContext
    from fabriclink._client.transport import RestTransport

_M = TypeVar("_M", bound=BaseModel)

_HTTP_OK = 200


def _parse(model: type[_M], data: Any, what: str) -> _M:  # noqa: ANN401
    """Validate *data* as *model*; invalid payloads raise ``ResponseDecodeError``."""
    logger.trace(f"{what} structure from API: {data}")
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ResponseDecodeError(
            _HTTP_OK, f"Unexpected {what} payload: {e.error_count()} error(s)"
        ) from e


class RestWorkspaceApi:
    """``WorkspaceApiPort`` backed by the Fabric REST API."""

    def __init__(self, transport: RestTransport) -> None:
        """Use *transport* for all requests."""
        self.transport = transport

    def list_workspaces(
        self, ctx: CallContext, continuation_token: str | None = None
    ) -> WorkspacePage:
        """Return a page of workspaces the caller has access to."""
        data = self.transport.call(
            "list_workspaces", ctx, continuation_token=continuation_token
        )
        return _parse(WorkspacePage, data, "workspace list")

    def get_workspace(self, ctx: CallContext, workspace_id: str) -> Workspace:
        """Return the workspace with id *workspace_id*."""
        data = self.transport.call("get_workspace", ctx, workspace_id=workspace_id)
        return _parse(Workspace, data, "workspace")


class RestWarehouseApi:
    """``WarehouseApiPort`` backed by the Fabric REST API."""

    def __init__(self, transport: RestTransport) -> None:
        """Use *transport* for all requests."""
        self.transport = transport

    def list_warehouses(
        self,
        ctx: CallContext,
        workspace_id: str,
        continuation_token: str | None = None,
    ) -> WarehousePage:
        """Return a page of warehouses in *workspace_id*."""
        data = self.transport.call(
            "list_warehouses",
            ctx,
            workspace_id=workspace_id,
            continuation_token=continuation_token,
        )
        return _parse(WarehousePage, data, "warehouse list")

    def get_warehouse(
        self, ctx: CallContext, workspace_id: str, warehouse_id: str
    ) -> Warehouse:
        """Return warehouse *warehouse_id* of *workspace_id*."""
        data = self.transport.call(
            "get_warehouse",
            ctx,
            workspace_id=workspace_id,
            warehouse_id=warehouse_id,
        )
        return _parse(Warehouse, data, "warehouse")
