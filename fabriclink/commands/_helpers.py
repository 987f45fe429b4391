"""Shared helpers for CLI commands."""

from __future__ import annotations

import sys
from pathlib import Path  # noqa: TC003

import pandas as pd
import questionary
from loguru import logger

from fabriclink.client import FabricClient  # noqa: TC001
from fabriclink.config import (
    FabricConfig,
    get_config_path,
    is_interactive_disabled,
    require_interactive,
)
from fabriclink.workspaces_cache import load_workspaces_cache, save_workspaces_cache

_RESCAN_VALUE = "__rescan__"


def load_config(config_path: Path | None = None) -> FabricConfig:
    """Load config from file and env. Path from FABRICLINK_CONFIG or argument."""
    return FabricConfig.load(config_path=config_path)


def require_credentials(cfg: FabricConfig) -> None:
    """Abort with a friendly message when no token is configured and prompts are off."""
    if cfg.token or not is_interactive_disabled():
        return
    config_path = get_config_path()
    sys.exit(
        "Ошибка: токен доступа Fabric не настроен.\n"
        "Запустите setup для сохранения настроек:\n  fabriclink setup\n"
        "Или задайте переменную окружения FABRIC_TOKEN.\n"
        f"Файл конфигурации: {config_path}"
    )


def resolve_workspace_from_args(
    workspace_arg: str | None,
    client: FabricClient,
) -> tuple[str, str] | None:
    """Resolve workspace id and name from the CLI ``--workspace`` argument.

    Returns ``(workspace_id, workspace_name)``, or ``None`` when
    *workspace_arg* is empty (caller should run the interactive TUI).  The
    name falls back to the id when the workspace is not in the cache.
    """
    if not workspace_arg or not workspace_arg.strip():
        return None
    cached = load_workspaces_cache()
    workspace_id = client.resolve_workspace_id(workspace_arg.strip(), cached=cached)
    workspace_name = workspace_arg.strip()
    for w in cached:
        if w.id == workspace_id:
            workspace_name = w.display_name
            break
    return (workspace_id, workspace_name)


def select_workspace_tui(client: FabricClient) -> tuple[str, str]:
    """Interactive workspace selection via TUI list with rescan option.

    Returns ``(workspace_id, workspace_name)``.
    """
    require_interactive("Pass --workspace / -w to specify the workspace id or name.")
    workspaces = load_workspaces_cache()
    while True:
        if not workspaces:
            logger.info("Кэш рабочих областей пуст. Загружаю список из Fabric...")
            workspaces = client.get_all_workspaces()
            save_workspaces_cache(workspaces)
            if not workspaces:
                sys.exit("Нет доступных рабочих областей.")
        choices: list[questionary.Choice] = [
            questionary.Choice(title=w.format_display(), value=w.id) for w in workspaces
        ]
        choices.append(
            questionary.Choice(
                title="↻ Обновить список рабочих областей из Fabric",
                value=_RESCAN_VALUE,
            ),
        )
        answer = questionary.select(
            "Выберите рабочую область:",
            choices=choices,
            use_shortcuts=False,
            use_indicator=True,
            use_search_filter=True,
            use_jk_keys=False,
        ).ask()
        if answer is None:
            sys.exit("Выбор отменён.")
        if answer == _RESCAN_VALUE:
            workspaces = client.get_all_workspaces()
            save_workspaces_cache(workspaces)
            logger.info(f"Загружено рабочих областей: {len(workspaces)}")
            continue
        workspace_id = str(answer)
        for w in workspaces:
            if w.id == workspace_id:
                return (workspace_id, w.display_name)
        return (workspace_id, workspace_id)


def rows_to_df(rows: list[dict[str, object]], columns: list[str]) -> pd.DataFrame:
    """Build a DataFrame with *columns* in order; missing values become empty."""
    return pd.DataFrame(rows).reindex(columns=columns)


def write_df_csv(df: pd.DataFrame, path: Path, label: str) -> None:
    """Write a DataFrame to CSV and log the result."""
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False, encoding="utf-8")
    logger.info(f"{label} saved to {path} ({len(df)} rows)")
