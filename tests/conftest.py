"""Shared pytest fixtures for fabriclink tests."""

from __future__ import annotations

import json
import os
from typing import TYPE_CHECKING

import pytest
import requests
import yaml

from fabriclink.client import FabricClient
from fabriclink.config import FabricConfig
from fabriclink.models import Warehouse, WarehouseProperties, Workspace
from tests.fixtures.fake_fabric_api import FakeWarehouseApi, FakeWorkspaceApi

if TYPE_CHECKING:
    from pathlib import Path

# Gate tests/integration/ collection on FABRIC_INTEGRATION_TOKEN env var.
collect_ignore_glob: list[str] = (
    [] if os.environ.get("FABRIC_INTEGRATION_TOKEN") else ["integration/*"]
)

FABRIC_ENV_VARS = (
    "FABRIC_API_ROOT",
    "FABRIC_TOKEN",
    "FABRIC_WORKSPACE_ID",
    "FABRIC_CONNECTION_TIMEOUT",
    "FABRIC_READ_TIMEOUT",
    "FABRICLINK_CONFIG",
    "FABRICLINK_NO_INTERACTIVE",
)


@pytest.fixture(autouse=True)
def _clear_fabric_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's own Fabric settings out of every test."""
    for var in FABRIC_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def make_workspace(
    name: str, ws_id: str | None = None, **overrides: object
) -> Workspace:
    """Create a Workspace with a predictable id derived from *name*."""
    defaults: dict[str, object] = {
        "id": ws_id or f"ws-{name.lower().replace(' ', '-')}",
        "display_name": name,
        "type": "Workspace",
    }
    defaults.update(overrides)
    return Workspace(**defaults)  # type: ignore[arg-type]


def make_warehouse(
    name: str,
    workspace_id: str = "ws-1",
    *,
    connection_string: str | None = "abc.datawarehouse.fabric.microsoft.com",
    wh_id: str | None = None,
) -> Warehouse:
    """Create a Warehouse with a predictable id derived from *name*."""
    return Warehouse(
        id=wh_id or f"wh-{name.lower().replace(' ', '-')}",
        workspace_id=workspace_id,
        display_name=name,
        type="Warehouse",
        properties=WarehouseProperties(connection_string=connection_string),
    )


def make_fake_client(
    workspace_pages: list[list[Workspace]] | None = None,
    warehouse_pages: dict[str, list[list[Warehouse]]] | None = None,
    **kwargs: object,
) -> tuple[FabricClient, FakeWorkspaceApi, FakeWarehouseApi]:
    """Create a FabricClient backed by fake API ports."""
    ws_api = FakeWorkspaceApi(workspace_pages or [])
    wh_api = FakeWarehouseApi(warehouse_pages or {})
    client = FabricClient(
        FabricConfig(token="test-token"),  # noqa: S106
        workspace_api=ws_api,
        warehouse_api=wh_api,
        **kwargs,  # type: ignore[arg-type]
    )
    return client, ws_api, wh_api


def make_response(
    status_code: int,
    body: object = None,
    *,
    content_type: str | None = "application/json",
    headers: dict[str, str] | None = None,
    reason: str = "",
    raw: bytes | None = None,
) -> requests.Response:
    """Build a real ``requests.Response`` without any network traffic."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.url = "https://api.fabric.microsoft.com/v1/workspaces"
    if raw is not None:
        response._content = raw
    elif body is None:
        response._content = b""
    elif isinstance(body, str):
        response._content = body.encode("utf-8")
    else:
        response._content = json.dumps(body).encode("utf-8")
    if content_type is not None:
        response.headers["Content-Type"] = content_type
    for key, value in (headers or {}).items():
        response.headers[key] = value
    response.encoding = "utf-8"
    return response


def http_error(response: requests.Response) -> requests.HTTPError:
    """Return the ``HTTPError`` that ``raise_for_status`` would raise."""
    try:
        response.raise_for_status()
    except requests.HTTPError as e:
        return e
    msg = f"HTTP {response.status_code} is not an error status"
    raise AssertionError(msg)


def write_test_config(
    path: Path,
    *,
    fabric: dict[str, object] | None = None,
    export: dict[str, object] | None = None,
) -> None:
    """Write a minimal config YAML for testing."""
    data: dict[str, object] = {
        "fabric": fabric
        if fabric is not None
        else {
            "api_root": "https://fabric.example.com/",
            "token": "test-token",
        },
    }
    if export:
        data["export"] = export
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
