"""CLI entry point for fabriclink."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from fabriclink.commands.check import run_check
from fabriclink.commands.setup import run_setup
from fabriclink.commands.warehouses import run_warehouses
from fabriclink.commands.workspaces import run_workspaces
from fabriclink.config import CONFIG_PATH
from fabriclink.exceptions import FabricLinkError


class CliApp:
    """Command-line interface for fabriclink."""

    def __init__(self) -> None:
        """Initialize parser and command definitions."""
        self._parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            description="Microsoft Fabric workspace and warehouse utilities.",
        )
        subparsers = parser.add_subparsers(dest="command", required=True)

        self._add_setup_parser(subparsers)
        self._add_workspaces_parser(subparsers)
        self._add_warehouses_parser(subparsers)
        self._add_check_parser(subparsers)

        return parser

    def _add_setup_parser(
        self,
        subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ) -> None:
        """Add the ``setup`` command parser."""
        parser = subparsers.add_parser(
            "setup",
            help="Interactively configure Fabric connection settings.",
        )
        parser.add_argument(
            "--config",
            default=None,
            help=(
                "Path to YAML config (default: ~/.config/fabriclink/config.yaml "
                "or FABRICLINK_CONFIG)."
            ),
        )

    def _add_workspaces_parser(
        self,
        subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ) -> None:
        """Add the ``workspaces`` command parser."""
        parser = subparsers.add_parser(
            "workspaces",
            help="List accessible workspaces and refresh the local cache.",
        )
        parser.add_argument(
            "--output",
            "-o",
            default=None,
            help="Also write the list to this CSV file.",
        )

    def _add_warehouses_parser(
        self,
        subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ) -> None:
        """Add the ``warehouses`` command parser."""
        parser = subparsers.add_parser(
            "warehouses",
            help="List SQL warehouses of a workspace.",
        )
        target = parser.add_mutually_exclusive_group()
        target.add_argument(
            "--workspace",
            "-w",
            type=str,
            default=None,
            help=(
                "Workspace id or name. If omitted, FABRIC_WORKSPACE_ID or "
                "interactive workspace selection is used."
            ),
        )
        target.add_argument(
            "--all-workspaces",
            action="store_true",
            help="List warehouses of every accessible workspace.",
        )
        parser.add_argument(
            "--output",
            "-o",
            default=None,
            help="Also write the list to this CSV file.",
        )

    def _add_check_parser(
        self,
        subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ) -> None:
        """Add the ``check`` command parser."""
        parser = subparsers.add_parser(
            "check",
            help="Check the token, network and access to a workspace.",
        )
        parser.add_argument(
            "--workspace",
            "-w",
            type=str,
            default=None,
            help="Workspace id or name (default: FABRIC_WORKSPACE_ID).",
        )
        parser.add_argument(
            "--warehouse",
            type=str,
            default=None,
            help="Warehouse id; print its JDBC URL after the check.",
        )

    def _run_command(self, args: argparse.Namespace) -> None:
        """Dispatch parsed args to the target command implementation."""
        if args.command == "setup":
            if args.config:
                setup_path = Path(args.config)
            else:
                path_env = os.environ.get("FABRICLINK_CONFIG")
                setup_path = Path(path_env) if path_env else CONFIG_PATH
            run_setup(setup_path)
            return
        if args.command == "workspaces":
            run_workspaces(args)
            return
        if args.command == "warehouses":
            run_warehouses(args)
            return
        if args.command == "check":
            run_check(args)
            return
        sys.exit(f"Неизвестная команда: {args.command}")

    def run(self, argv: list[str] | None = None) -> None:
        """Run the CLI with the given arguments."""
        args = self._parser.parse_args(argv)
        try:
            self._run_command(args)
        except FabricLinkError as e:
            sys.exit(f"Ошибка: {e}")


def main(argv: list[str] | None = None) -> None:
    """Compatibility entry point for setuptools/CLI wrappers."""
    CliApp().run(argv)


if __name__ == "__main__":
    main()
