"""Endpoint table of the Fabric REST API operations used by fabriclink.

Each entry maps an operation name to its HTTP verb, path template and
parameter bindings.  ``RestTransport.call`` is the only consumer.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from urllib.parse import quote

from fabriclink.exceptions import InvalidParameterError


@dataclass(frozen=True, slots=True)
class Endpoint:
    """HTTP binding of one API operation.

    ``path_params`` and ``query_params`` map Python keyword names to the
    names used in the path template / query string.
    """

    name: str
    method: str
    path: str
    path_params: dict[str, str]
    query_params: dict[str, str]

    def __post_init__(self) -> None:
        """Check that the path template uses exactly the declared path params."""
        fields = {f for _, f, _, _ in string.Formatter().parse(self.path) if f}
        if fields != set(self.path_params.values()):
            msg = (
                f"Endpoint {self.name!r}: path fields {sorted(fields)} do not "
                f"match declared path params {sorted(self.path_params.values())}"
            )
            raise ValueError(msg)

    def bind(self, params: dict[str, str | None]) -> tuple[str, dict[str, str]]:
        """Return ``(relative_path, query)`` for keyword *params*.

        Path params are required and URL-quoted; an empty one raises
        ``InvalidParameterError``.  Query params set to None are dropped.
        Unknown keywords raise ``ValueError``.
        """
        unknown = set(params) - set(self.path_params) - set(self.query_params)
        if unknown:
            msg = f"Endpoint {self.name!r}: unknown parameter(s) {sorted(unknown)}"
            raise ValueError(msg)
        path_values: dict[str, str] = {}
        for py_name, wire_name in self.path_params.items():
            value = params.get(py_name)
            if not value:
                msg = f"Endpoint {self.name!r}: missing path parameter {py_name!r}"
                raise InvalidParameterError(msg)
            path_values[wire_name] = _quote_segment(str(value))
        query = {
            wire_name: str(params[py_name])
            for py_name, wire_name in self.query_params.items()
            if params.get(py_name) is not None
        }
        return self.path.format(**path_values), query


def _quote_segment(value: str) -> str:
    """Percent-encode *value* as a single path segment.

    ``quote`` keeps dots, so ``.`` and ``..`` are encoded by hand or they
    would be resolved against the parent path.
    """
    segment = quote(value, safe="")
    if set(segment) == {"."}:
        return segment.replace(".", "%2E")
    return segment


_CONTINUATION = {"continuation_token": "continuationToken"}

ENDPOINTS: dict[str, Endpoint] = {
    e.name: e
    for e in (
        Endpoint(
            name="list_workspaces",
            method="GET",
            path="v1/workspaces",
            path_params={},
            query_params=_CONTINUATION,
        ),
        Endpoint(
            name="get_workspace",
            method="GET",
            path="v1/workspaces/{workspaceId}",
            path_params={"workspace_id": "workspaceId"},
            query_params={},
        ),
        Endpoint(
            name="list_warehouses",
            method="GET",
            path="v1/workspaces/{workspaceId}/warehouses",
            path_params={"workspace_id": "workspaceId"},
            query_params=_CONTINUATION,
        ),
        Endpoint(
            name="get_warehouse",
            method="GET",
            path="v1/workspaces/{workspaceId}/warehouses/{warehouseId}",
            path_params={
                "workspace_id": "workspaceId",
                "warehouse_id": "warehouseId",
            },
            query_params={},
        ),
    )
}


def get_endpoint(name: str) -> Endpoint:
    """Return the endpoint registered under *name*."""
    try:
        return ENDPOINTS[name]
    except KeyError:
        msg = f"Unknown endpoint: {name!r}"
        raise ValueError(msg) from None
