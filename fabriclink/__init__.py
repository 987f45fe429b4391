"""fabriclink -- Microsoft Fabric workspace and warehouse REST client."""

from fabriclink._client.context import CancellationToken, Interaction
from fabriclink._client.ports import WarehouseApiPort, WorkspaceApiPort
from fabriclink._client.wrapper import ApiWrapper
from fabriclink._version import __version__
from fabriclink.client import FabricClient, natural_sort_key, warehouse_jdbc_url
from fabriclink.config import FabricConfig
from fabriclink.exceptions import (
    ConnectionCheckError,
    FabricLinkError,
    ForbiddenError,
    InteractiveModeRequiredError,
    InvalidParameterError,
    NotAuthorizedError,
    NotFoundError,
    OperationCancelledError,
    RateLimitError,
    RemoteError,
    ResponseDecodeError,
    ServerError,
    TransportError,
)
from fabriclink.models import (
    Page,
    Warehouse,
    WarehousePage,
    WarehouseProperties,
    Workspace,
    WorkspacePage,
)
from fabriclink.retry import retrying

__all__ = [
    "ApiWrapper",
    "CancellationToken",
    "ConnectionCheckError",
    "FabricClient",
    "FabricConfig",
    "FabricLinkError",
    "ForbiddenError",
    "Interaction",
    "InteractiveModeRequiredError",
    "InvalidParameterError",
    "NotAuthorizedError",
    "NotFoundError",
    "OperationCancelledError",
    "Page",
    "RateLimitError",
    "RemoteError",
    "ResponseDecodeError",
    "ServerError",
    "TransportError",
    "Warehouse",
    "WarehouseApiPort",
    "WarehousePage",
    "WarehouseProperties",
    "Workspace",
    "WorkspaceApiPort",
    "WorkspacePage",
    "__version__",
    "natural_sort_key",
    "retrying",
    "warehouse_jdbc_url",
]
