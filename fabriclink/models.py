"""Pydantic models for Microsoft Fabric REST API records."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_T = TypeVar("_T")


class _Record(BaseModel):
    """Immutable record decoded from a camelCase JSON payload."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# ------------------------------------------------------------------
# Fabric entity models (workspace / warehouse)
# ------------------------------------------------------------------


class Workspace(_Record):
    """Fabric workspace summary."""

    id: str
    display_name: str
    description: str | None = None
    type: str | None = None
    capacity_id: str | None = None

    def format_display(self) -> str:
        """Human-readable one-line summary for TUI menus."""
        return f"{self.display_name} (id={self.id})"


class WarehouseProperties(_Record):
    """Connection details of a SQL warehouse."""

    connection_string: str | None = None
    created_date: str | None = None
    last_updated_time: str | None = None


class Warehouse(_Record):
    """Fabric SQL warehouse.

    ``workspace_id`` refers to the owning workspace; the reference is not
    checked.
    """

    id: str
    workspace_id: str
    display_name: str
    description: str | None = None
    type: str | None = None
    properties: WarehouseProperties | None = None

    @property
    def connection_string(self) -> str | None:
        """SQL endpoint host name, or None when the service did not send one."""
        if self.properties is None:
            return None
        return self.properties.connection_string


# ------------------------------------------------------------------
# Pagination
# ------------------------------------------------------------------


class Page(_Record, Generic[_T]):
    """One page of a paginated listing.

    ``items`` keeps the server order.  A page without ``continuation_token``
    is the last one; an empty token string counts as absent.
    """

    items: list[_T] = Field(default_factory=list, alias="value")
    continuation_token: str | None = None
    continuation_uri: str | None = None

    @field_validator("continuation_token", "continuation_uri")
    @classmethod
    def _empty_as_none(cls, v: str | None) -> str | None:
        return v or None

    @property
    def has_more(self) -> bool:
        """True when another page can be requested with the token."""
        return self.continuation_token is not None


class WorkspacePage(Page[Workspace]):
    """Page of ``GET v1/workspaces``."""


class WarehousePage(Page[Warehouse]):
    """Page of ``GET v1/workspaces/{workspaceId}/warehouses``."""


# ------------------------------------------------------------------
# Error payload
# ------------------------------------------------------------------


class ErrorBody(_Record):
    """JSON body of a Fabric error response."""

    error_code: str | None = None
    message: str | None = None
    request_id: str | None = None

    def format_message(self) -> str:
        """Combine message and error code; empty string when both are blank."""
        message = (self.message or "").strip()
        code = (self.error_code or "").strip()
        if message and code:
            return f"{message} (error code: {code})"
        return message or code
