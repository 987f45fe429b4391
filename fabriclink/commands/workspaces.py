"""Implementation of the ``fabriclink workspaces`` command."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from fabriclink.client import FabricClient
from fabriclink.commands._helpers import (
    load_config,
    require_credentials,
    rows_to_df,
    write_df_csv,
)
from fabriclink.config import load_export_config
from fabriclink.workspaces_cache import save_workspaces_cache

if TYPE_CHECKING:
    import argparse

    from fabriclink.models import Workspace


def workspace_rows(workspaces: list[Workspace]) -> list[dict[str, object]]:
    """Flatten workspaces into CSV rows."""
    return [w.model_dump() for w in workspaces]


def run_workspaces(args: argparse.Namespace) -> None:
    """List every accessible workspace and refresh the workspaces cache."""
    cfg = load_config()
    require_credentials(cfg)

    with FabricClient(cfg) as client:
        client.authenticate()
        workspaces = client.get_all_workspaces()

    save_workspaces_cache(workspaces)
    logger.info(f"Рабочих областей: {len(workspaces)}")
    for w in workspaces:
        logger.info(f"  {w.format_display()}")

    if args.output:
        export_cfg = load_export_config()
        df = rows_to_df(workspace_rows(workspaces), export_cfg.workspace_columns)
        write_df_csv(df, Path(args.output), "Workspaces CSV")
