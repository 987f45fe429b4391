"""Fabric client logic: connect, list workspaces and warehouses."""

from __future__ import annotations

import re
import socket
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

import requests
from loguru import logger

from fabriclink._client.auth import PromptTokenProvider, StaticTokenProvider
from fabriclink._client.context import CancellationToken, Interaction, call_scope
from fabriclink._client.pagination import list_all
from fabriclink._client.rest_adapter import RestWarehouseApi, RestWorkspaceApi
from fabriclink._client.transport import RestTransport
from fabriclink._client.wrapper import ApiWrapper
from fabriclink.config import FabricConfig
from fabriclink.exceptions import (
    ConnectionCheckError,
    FabricLinkError,
    ForbiddenError,
    NotFoundError,
    OperationCancelledError,
    RemoteError,
    TransportError,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator
    from types import TracebackType

    from typing_extensions import Self

    from fabriclink._client.auth import AccessToken, TokenProvider
    from fabriclink._client.ports import WarehouseApiPort, WorkspaceApiPort
    from fabriclink.models import Warehouse, WarehousePage, Workspace, WorkspacePage

_R = TypeVar("_R", "Workspace", "Warehouse")

_JDBC_PORT = 1433

_DIGITS = re.compile(r"(\d+)")

_UNKNOWN_HOST_MARKERS = (
    "NameResolutionError",
    "Name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "Temporary failure in name resolution",
)


def natural_sort_key(text: str) -> list[int | str]:
    """Key for alphanumeric ordering: ``"ws 2"`` sorts before ``"ws 10"``.

    Text chunks compare case-insensitively.  ``re.split`` with a capturing
    group alternates text and digit chunks, so keys always line up by type.
    """
    return [
        int(chunk) if i % 2 else chunk.casefold()
        for i, chunk in enumerate(_DIGITS.split(text))
    ]


def _is_uuid(text: str) -> bool:
    """Return True when *text* looks like a Fabric item id (a UUID)."""
    try:
        uuid.UUID(text)
    except ValueError:
        return False
    return True


def _is_unknown_host(error: BaseException | None) -> bool:
    """Return True when *error* or one of its causes is a failed DNS lookup.

    urllib3 keeps the resolver error only in the text of the wrapping
    ``requests.ConnectionError``, so the chain is checked by type and by text.
    """
    seen: set[int] = set()
    while error is not None and id(error) not in seen:
        seen.add(id(error))
        if isinstance(error, socket.gaierror):
            return True
        text = repr(error)
        if any(marker in text for marker in _UNKNOWN_HOST_MARKERS):
            return True
        error = error.__cause__ or error.__context__
    return False


def warehouse_jdbc_url(warehouse: Warehouse) -> str:
    """Build the SQL Server JDBC URL of *warehouse*."""
    host = warehouse.connection_string
    if not host:
        raise FabricLinkError(
            f"Warehouse {warehouse.display_name!r} (id={warehouse.id}) "
            "has no connection string"
        )
    return f"jdbc:sqlserver://{host}:{_JDBC_PORT};database={warehouse.display_name}"


@dataclass(frozen=True)
class _Apis:
    """Wrapped API ports used for one unit of work."""

    workspaces: ApiWrapper[WorkspaceApiPort]
    warehouses: ApiWrapper[WarehouseApiPort]


def _sorted_by_name(items: Iterable[_R]) -> list[_R]:
    """Sort workspaces or warehouses by display name in natural order."""
    return sorted(items, key=lambda item: natural_sort_key(item.display_name))


class FabricClient:
    """High-level Microsoft Fabric client for workspaces and warehouses.

    Can be used as a context manager to keep one HTTP session open across
    multiple calls::

        with FabricClient(cfg) as client:
            workspaces = client.get_all_workspaces()
            warehouses = client.get_all_warehouses(workspaces[0].id)

    Without the context manager, each public method opens and closes its
    own session.  Every request runs through :class:`ApiWrapper`, so
    interactive credential prompts are suppressed; call
    :meth:`authenticate` beforehand to allow a single prompt.
    """

    def __init__(
        self,
        cfg: FabricConfig | None = None,
        *,
        workspace_api: WorkspaceApiPort | None = None,
        warehouse_api: WarehouseApiPort | None = None,
        token_provider: TokenProvider | None = None,
        session_factory: Callable[[], requests.Session] | None = None,
        cancel: CancellationToken | None = None,
    ) -> None:
        """Store configuration and optional API ports for DI.

        When *cfg* is ``None``, configuration is loaded automatically from
        environment variables, config file, and built-in preset via
        :meth:`FabricConfig.load`.

        When both *workspace_api* and *warehouse_api* are provided they are
        used directly.  Otherwise REST adapters are created over a
        ``requests`` session from *session_factory*.
        """
        self._cfg = cfg or FabricConfig.load()
        self._token_provider: TokenProvider = token_provider or (
            StaticTokenProvider(self._cfg.token, self._cfg.token_type)
            if self._cfg.token
            else PromptTokenProvider(token_type=self._cfg.token_type)
        )
        self._session_factory = session_factory or requests.Session
        self._cancel = cancel
        self._injected: _Apis | None = None
        if workspace_api is not None and warehouse_api is not None:
            self._injected = self._wrap(workspace_api, warehouse_api)
        elif workspace_api is not None or warehouse_api is not None:
            msg = "workspace_api and warehouse_api must be injected together"
            raise ValueError(msg)
        # Persistent session opened by __enter__, closed by __exit__.
        self._session: requests.Session | None = None
        self._persistent: _Apis | None = None

    @property
    def config(self) -> FabricConfig:
        """Return the effective configuration."""
        return self._cfg

    # ------------------------------------------------------------------
    # Context manager (optional session reuse)
    # ------------------------------------------------------------------

    def __enter__(self) -> Self:
        """Open a persistent HTTP session for the lifetime of this block."""
        if self._injected is not None:
            return self
        if self._session is not None:
            msg = "FabricClient session is already open"
            raise RuntimeError(msg)
        self._session = self._session_factory()
        self._persistent = self._rest_apis(self._session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close the persistent HTTP session."""
        self._persistent = None
        if self._session is not None:
            self._session.close()
            self._session = None

    # ------------------------------------------------------------------
    # API lifecycle
    # ------------------------------------------------------------------

    @staticmethod
    def _wrap(
        workspace_api: WorkspaceApiPort, warehouse_api: WarehouseApiPort
    ) -> _Apis:
        return _Apis(
            workspaces=ApiWrapper(workspace_api, "workspaces"),
            warehouses=ApiWrapper(warehouse_api, "warehouses"),
        )

    def _rest_apis(self, session: requests.Session) -> _Apis:
        """Build REST adapters over *session*."""
        transport = RestTransport(
            session,
            self._token_provider,
            api_root=self._cfg.api_root,
            timeout=self._cfg.timeouts(),
        )
        return self._wrap(RestWorkspaceApi(transport), RestWarehouseApi(transport))

    @contextmanager
    def _apis(self) -> Iterator[_Apis]:
        """Yield the best API set (injected/persistent or over a new session)."""
        apis = self._injected or self._persistent
        if apis is not None:
            yield apis
            return
        with self._session_factory() as session:
            yield self._rest_apis(session)

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def authenticate(self) -> AccessToken:
        """Resolve the access token, prompting the user if necessary.

        This is the only call that may prompt; afterwards the token provider
        serves the remembered token to non-interactive calls.
        """
        with call_scope("authenticate", interaction=Interaction.INTERACTIVE) as ctx:
            return self._token_provider.get_token(ctx)

    # ------------------------------------------------------------------
    # Workspaces
    # ------------------------------------------------------------------

    def list_workspaces(self, continuation_token: str | None = None) -> WorkspacePage:
        """Fetch one page of workspaces."""
        with self._apis() as apis:
            return apis.workspaces.invoke(
                lambda ctx: apis.workspaces.api.list_workspaces(
                    ctx, continuation_token
                ),
                label="list",
                cancel=self._cancel,
            )

    def get_workspace(self, workspace_id: str) -> Workspace:
        """Fetch a single workspace by id."""
        with self._apis() as apis:
            return apis.workspaces.invoke(
                lambda ctx: apis.workspaces.api.get_workspace(ctx, workspace_id),
                label="get",
                cancel=self._cancel,
            )

    def iter_workspaces(self) -> Iterator[Workspace]:
        """Lazily yield all workspaces across pages, in server order."""
        with self._apis() as apis:
            yield from list_all(
                lambda token: apis.workspaces.invoke(
                    lambda ctx: apis.workspaces.api.list_workspaces(ctx, token),
                    label="list",
                    cancel=self._cancel,
                ),
                cancel=self._cancel,
            )

    def get_all_workspaces(self) -> list[Workspace]:
        """Fetch all workspaces sorted by display name (natural order)."""
        workspaces = _sorted_by_name(self.iter_workspaces())
        logger.debug(f"Fetched {len(workspaces)} workspace(s)")
        return workspaces

    def resolve_workspace_id(
        self,
        workspace_spec: str,
        *,
        cached: list[Workspace] | None = None,
    ) -> str:
        """Resolve a workspace id from an id or a display name.

        Display names are matched case-insensitively, first in *cached*,
        then via the API.  Anything that matches no name is returned as is
        and treated as an id.
        """
        s = workspace_spec.strip()
        if _is_uuid(s):
            return s
        search = s.casefold()
        if cached:
            for w in cached:
                if w.id == s or w.display_name.casefold() == search:
                    return w.id
        for w in self.iter_workspaces():
            if w.id == s or w.display_name.casefold() == search:
                return w.id
        logger.trace(f"No workspace named {s!r}; using it as an id")
        return s

    def test_connection(self, workspace_id: str) -> Workspace:
        """Fetch *workspace_id* to check token, network and access rights.

        Failures are re-raised as ``ConnectionCheckError`` with a
        human-readable reason; the original error is chained.  An expired
        token (401) is a service error, not denied access.
        """
        try:
            return self.get_workspace(workspace_id)
        except NotFoundError as e:
            raise ConnectionCheckError("Specified workspace does not exist!") from e
        except ForbiddenError as e:
            raise ConnectionCheckError(
                "Access to workspace was denied. "
                "Please check that the user has access to the Fabric workspace."
            ) from e
        except RemoteError as e:
            raise ConnectionCheckError(
                f"Could not get Fabric workspaces: {e.message}"
            ) from e
        except TransportError as e:
            if isinstance(e.__cause__, requests.Timeout):
                raise ConnectionCheckError("Connection timed out!") from e
            if _is_unknown_host(e.__cause__):
                raise ConnectionCheckError(
                    "No route to host! Please check your Internet connection."
                ) from e
            if isinstance(e.__cause__, requests.ConnectionError):
                raise ConnectionCheckError(str(e)) from e
            raise ConnectionCheckError("Error while testing connection!") from e
        except OperationCancelledError:
            raise
        except FabricLinkError as e:
            raise ConnectionCheckError("Error while testing connection!") from e

    # ------------------------------------------------------------------
    # Warehouses
    # ------------------------------------------------------------------

    def list_warehouses(
        self, workspace_id: str, continuation_token: str | None = None
    ) -> WarehousePage:
        """Fetch one page of warehouses in *workspace_id*."""
        with self._apis() as apis:
            return apis.warehouses.invoke(
                lambda ctx: apis.warehouses.api.list_warehouses(
                    ctx, workspace_id, continuation_token
                ),
                label="list",
                cancel=self._cancel,
            )

    def get_warehouse(self, workspace_id: str, warehouse_id: str) -> Warehouse:
        """Fetch a single warehouse by id."""
        with self._apis() as apis:
            return apis.warehouses.invoke(
                lambda ctx: apis.warehouses.api.get_warehouse(
                    ctx, workspace_id, warehouse_id
                ),
                label="get",
                cancel=self._cancel,
            )

    def iter_warehouses(self, workspace_id: str) -> Iterator[Warehouse]:
        """Lazily yield all warehouses of *workspace_id*, in server order."""
        with self._apis() as apis:
            yield from list_all(
                lambda token: apis.warehouses.invoke(
                    lambda ctx: apis.warehouses.api.list_warehouses(
                        ctx, workspace_id, token
                    ),
                    label="list",
                    cancel=self._cancel,
                ),
                cancel=self._cancel,
            )

    def get_all_warehouses(self, workspace_id: str) -> list[Warehouse]:
        """Fetch all warehouses of *workspace_id* sorted by display name."""
        warehouses = _sorted_by_name(self.iter_warehouses(workspace_id))
        logger.debug(f"Fetched {len(warehouses)} warehouse(s) in {workspace_id}")
        return warehouses

    def get_warehouse_jdbc_url(self, workspace_id: str, warehouse_id: str) -> str:
        """Fetch a warehouse and return its JDBC URL."""
        return warehouse_jdbc_url(self.get_warehouse(workspace_id, warehouse_id))
