"""Internal helpers for splitting `fabriclink.client` responsibilities."""

from fabriclink._client.auth import (
    AccessToken,
    PromptTokenProvider,
    StaticTokenProvider,
    TokenProvider,
)
from fabriclink._client.context import (
    CallContext,
    CancellationToken,
    Interaction,
    call_scope,
)
from fabriclink._client.endpoints import ENDPOINTS, Endpoint
from fabriclink._client.errors import error_from_response, translate_exception
from fabriclink._client.pagination import iter_pages, list_all
from fabriclink._client.ports import WarehouseApiPort, WorkspaceApiPort
from fabriclink._client.rest_adapter import RestWarehouseApi, RestWorkspaceApi
from fabriclink._client.transport import RestTransport
from fabriclink._client.wrapper import ApiWrapper

__all__ = [
    "ENDPOINTS",
    "AccessToken",
    "ApiWrapper",
    "CallContext",
    "CancellationToken",
    "Endpoint",
    "Interaction",
    "PromptTokenProvider",
    "RestTransport",
    "RestWarehouseApi",
    "RestWorkspaceApi",
    "StaticTokenProvider",
    "TokenProvider",
    "WarehouseApiPort",
    "WorkspaceApiPort",
    "call_scope",
    "error_from_response",
    "iter_pages",
    "list_all",
    "translate_exception",
]
