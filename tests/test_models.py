"""Tests for Fabric record models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from fabriclink.models import Warehouse, WarehousePage, Workspace


def test_workspace_from_wire() -> None:
    """camelCase keys map to snake_case fields; extra keys are ignored."""
    ws = Workspace.model_validate(
        {
            "id": "ws-1",
            "displayName": "Sales",
            "capacityId": "cap-9",
            "domainId": "ignored",
        }
    )
    assert ws.display_name == "Sales"
    assert ws.capacity_id == "cap-9"
    assert ws.format_display() == "Sales (id=ws-1)"


def test_workspace_is_immutable() -> None:
    """Records cannot be modified after decoding."""
    ws = Workspace(id="ws-1", display_name="Sales")
    with pytest.raises(ValidationError):
        ws.display_name = "Other"  # type: ignore[misc]


def test_warehouse_without_properties() -> None:
    """A warehouse may come without connection details."""
    wh = Warehouse.model_validate(
        {"id": "wh-1", "workspaceId": "ws-1", "displayName": "Lake"}
    )
    assert wh.connection_string is None


def test_warehouse_page_keeps_order() -> None:
    """Items keep the server order."""
    page = WarehousePage.model_validate(
        {
            "value": [
                {"id": "b", "workspaceId": "ws", "displayName": "B"},
                {"id": "a", "workspaceId": "ws", "displayName": "A"},
            ],
            "continuationToken": "next",
        }
    )
    assert [w.id for w in page.items] == ["b", "a"]
    assert page.has_more
