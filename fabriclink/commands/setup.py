"""Implementation of the ``fabriclink setup`` command."""

from __future__ import annotations

import getpass
from typing import TYPE_CHECKING

from loguru import logger

from fabriclink.config import DEFAULT_API_ROOT, FabricConfig, require_interactive

if TYPE_CHECKING:
    from pathlib import Path


def _prompt_timeout(label: str, default: int) -> int:
    """Ask for a non-negative timeout in seconds; Enter keeps *default*."""
    while True:
        raw = input(f"{label} (секунды, 0 = без ограничения) [{default}]: ").strip()
        if not raw:
            return default
        if raw.isdigit():
            return int(raw)
        logger.warning("Введите неотрицательное целое число.")


def run_setup(config_path: Path) -> None:
    """Interactively ask user for Fabric settings and save them to config file."""
    require_interactive(
        "The 'setup' command is fully interactive. "
        "Configure via env vars (FABRIC_TOKEN, FABRIC_WORKSPACE_ID, etc.) "
        "or edit the config file directly."
    )
    existing = FabricConfig.from_file(config_path)

    api_default = existing.api_root or DEFAULT_API_ROOT
    api_root = input(f"Адрес Fabric REST API [{api_default}]: ").strip() or api_default

    prompt = "Токен доступа (необязательно)"
    if existing.token:
        prompt += f" [{existing.token[:6]}...]"
    prompt += ": "
    token = getpass.getpass(prompt).strip() or existing.token
    if not token:
        logger.warning("Токен не указан, его можно задать позже через FABRIC_TOKEN.")

    ws_default = existing.workspace_id or ""
    ws_prompt = "Id рабочей области по умолчанию (необязательно)"
    if ws_default:
        ws_prompt += f" [{ws_default}]"
    ws_prompt += ": "
    workspace_id = input(ws_prompt).strip() or ws_default

    connection_timeout = _prompt_timeout(
        "Таймаут подключения", existing.connection_timeout
    )
    read_timeout = _prompt_timeout("Таймаут чтения", existing.read_timeout)

    cfg = FabricConfig(
        api_root=api_root,
        token=token,
        token_type=existing.token_type,
        workspace_id=workspace_id or None,
        connection_timeout=connection_timeout,
        read_timeout=read_timeout,
    )
    saved_path = cfg.save_to_file(config_path)
    logger.info(f"Готово! Конфигурация сохранена в {saved_path}")
