"""Implementation of the ``fabriclink warehouses`` command."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger
from tqdm import tqdm

from fabriclink.client import FabricClient, warehouse_jdbc_url
from fabriclink.commands._helpers import (
    load_config,
    require_credentials,
    resolve_workspace_from_args,
    rows_to_df,
    select_workspace_tui,
    write_df_csv,
)
from fabriclink.config import load_export_config
from fabriclink.exceptions import FabricLinkError, ForbiddenError
from fabriclink.workspaces_cache import save_workspaces_cache

if TYPE_CHECKING:
    import argparse

    from fabriclink.models import Warehouse


def warehouse_rows(warehouses: list[Warehouse]) -> list[dict[str, object]]:
    """Flatten warehouses into CSV rows (adds connection string and JDBC URL)."""
    rows: list[dict[str, object]] = []
    for wh in warehouses:
        row: dict[str, object] = wh.model_dump(exclude={"properties"})
        row["connection_string"] = wh.connection_string or ""
        row["jdbc_url"] = warehouse_jdbc_url(wh) if wh.connection_string else ""
        rows.append(row)
    return rows


def _collect_all_workspaces(client: FabricClient) -> list[Warehouse]:
    """Fetch warehouses of every accessible workspace.

    Workspaces the caller may list but not read are skipped with a warning.
    """
    workspaces = client.get_all_workspaces()
    save_workspaces_cache(workspaces)
    result: list[Warehouse] = []
    skipped: list[str] = []
    for ws in tqdm(workspaces, desc="Scanning workspaces", unit="ws", leave=False):
        try:
            result.extend(client.get_all_warehouses(ws.id))
        except ForbiddenError:
            logger.warning(f"Нет доступа к рабочей области {ws.format_display()}")
            skipped.append(ws.id)
    if skipped:
        logger.warning(f"Пропущено рабочих областей: {len(skipped)}")
    return result


def run_warehouses(args: argparse.Namespace) -> None:
    """List warehouses of one workspace (or of all with ``--all-workspaces``)."""
    cfg = load_config()
    require_credentials(cfg)

    with FabricClient(cfg) as client:
        client.authenticate()
        if args.all_workspaces:
            warehouses = _collect_all_workspaces(client)
        else:
            try:
                resolved = resolve_workspace_from_args(
                    args.workspace or cfg.workspace_id, client
                )
            except FabricLinkError as e:
                sys.exit(str(e))
            workspace_id, workspace_name = resolved or select_workspace_tui(client)
            logger.info(f"Рабочая область: {workspace_name} (id={workspace_id})")
            warehouses = client.get_all_warehouses(workspace_id)

    logger.info(f"Хранилищ: {len(warehouses)}")
    for wh in warehouses:
        logger.info(f"  {wh.display_name} (id={wh.id})")

    if args.output:
        export_cfg = load_export_config()
        df = rows_to_df(warehouse_rows(warehouses), export_cfg.warehouse_columns)
        write_df_csv(df, Path(args.output), "Warehouses CSV")
