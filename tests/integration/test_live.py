"""Read-only checks against a live Fabric tenant."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from fabriclink.exceptions import ForbiddenError, NotFoundError

if TYPE_CHECKING:
    from fabriclink.client import FabricClient

pytestmark = pytest.mark.integration


def test_list_and_get_workspace(live_client: FabricClient) -> None:
    """Every listed workspace can be fetched by id."""
    workspaces = live_client.get_all_workspaces()
    if not workspaces:
        pytest.skip("The integration identity has no workspaces")
    first = live_client.get_workspace(workspaces[0].id)
    assert first.id == workspaces[0].id


def test_warehouses_belong_to_workspace(live_client: FabricClient) -> None:
    """Listed warehouses carry the id of the workspace they were listed in."""
    for ws in live_client.get_all_workspaces()[:3]:
        for wh in live_client.iter_warehouses(ws.id):
            assert wh.workspace_id == ws.id


def test_unknown_workspace_is_not_found(live_client: FabricClient) -> None:
    """A random id yields NotFoundError (or access denied on some tenants)."""
    with pytest.raises((NotFoundError, ForbiddenError)):
        live_client.get_workspace("00000000-0000-0000-0000-000000000000")
