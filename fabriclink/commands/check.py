"""Implementation of the ``fabriclink check`` command."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from loguru import logger

from fabriclink.client import FabricClient
from fabriclink.commands._helpers import (
    load_config,
    require_credentials,
    resolve_workspace_from_args,
)
from fabriclink.exceptions import ConnectionCheckError

if TYPE_CHECKING:
    import argparse


def run_check(args: argparse.Namespace) -> None:
    """Check access to a workspace; optionally print a warehouse JDBC URL."""
    cfg = load_config()
    require_credentials(cfg)
    workspace_arg = args.workspace or cfg.workspace_id
    if not workspace_arg:
        sys.exit(
            "Ошибка: рабочая область не указана.\n"
            "Передайте --workspace или задайте FABRIC_WORKSPACE_ID."
        )

    with FabricClient(cfg) as client:
        client.authenticate()
        resolved = resolve_workspace_from_args(workspace_arg, client)
        if resolved is None:
            sys.exit("Ошибка: рабочая область не указана.")
        workspace_id, _name = resolved
        try:
            workspace = client.test_connection(workspace_id)
        except ConnectionCheckError as e:
            logger.error(f"check: {e}")
            sys.exit(1)
        logger.info(f"check: {workspace.format_display()}: OK")

        if args.warehouse:
            jdbc_url = client.get_warehouse_jdbc_url(workspace_id, args.warehouse)
            logger.info(f"JDBC URL: {jdbc_url}")
