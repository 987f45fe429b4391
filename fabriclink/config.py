"""Configuration loading with priority: env > config file > preset > defaults."""

from __future__ import annotations

import importlib.resources
import os
from pathlib import Path

import yaml
from loguru import logger
from pydantic import BaseModel, field_validator

from fabriclink.exceptions import InteractiveModeRequiredError

CONFIG_DIR = Path.home() / ".config" / "fabriclink"
CONFIG_PATH = CONFIG_DIR / "config.yaml"

DEFAULT_API_ROOT = "https://api.fabric.microsoft.com/"


def is_interactive_disabled() -> bool:
    """Return True when FABRICLINK_NO_INTERACTIVE is 'true' (case-insensitive)."""
    return os.environ.get("FABRICLINK_NO_INTERACTIVE", "").lower() == "true"


def require_interactive(hint: str) -> None:
    """Raise if interactive prompts are disabled.

    Parameters
    ----------
    hint:
        Human-readable explanation of which CLI flag / env var the caller
        should use instead of an interactive prompt.

    """
    if is_interactive_disabled():
        raise InteractiveModeRequiredError(
            f"Interactive prompt required but FABRICLINK_NO_INTERACTIVE=true. {hint}"
        )


def get_config_path(config_path: Path | None = None) -> Path:
    """Return path to config file.

    Uses *config_path* if provided, otherwise FABRICLINK_CONFIG env var,
    otherwise default CONFIG_PATH.
    """
    if config_path is not None:
        return config_path
    path = os.environ.get("FABRICLINK_CONFIG")
    return Path(path) if path else CONFIG_PATH


def get_workspaces_cache_path(config_path: Path | None = None) -> Path:
    """Path to workspaces cache YAML (same directory as config file)."""
    return get_config_path(config_path).parent / "workspaces.yaml"


def _load_preset_data() -> dict[str, object]:
    """Load the bundled preset YAML and return raw dict."""
    ref = importlib.resources.files("fabriclink.presets").joinpath("default.yaml")
    text = ref.read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    if isinstance(data, dict):
        return data
    return {}


def _load_raw_yaml(path: Path) -> dict[str, object]:
    """Load a YAML file and return its top-level mapping (or empty dict)."""
    if not path.is_file():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        logger.warning(f"Invalid config format in {path}; expected mapping.")
        return {}
    return data


def _env_int(name: str) -> int | None:
    """Read an integer env var; unset or blank gives None."""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}")
        return None


class FabricConfig(BaseModel):
    """Fabric REST API connection settings.

    Timeouts are in seconds; ``0`` means no timeout.
    """

    api_root: str = DEFAULT_API_ROOT
    token: str | None = None
    token_type: str = "Bearer"
    workspace_id: str | None = None
    connection_timeout: int = 30
    read_timeout: int = 30

    @field_validator("connection_timeout", "read_timeout")
    @classmethod
    def _non_negative(cls, v: int) -> int:
        if v < 0:
            msg = f"timeout must be a non-negative number of seconds, got {v}"
            raise ValueError(msg)
        return v

    @field_validator("api_root")
    @classmethod
    def _trailing_slash(cls, v: str) -> str:
        v = v.strip() or DEFAULT_API_ROOT
        return v if v.endswith("/") else v + "/"

    def timeouts(self) -> tuple[float | None, float | None]:
        """Return ``(connect, read)`` timeouts in the form ``requests`` expects."""
        return (
            float(self.connection_timeout) or None,
            float(self.read_timeout) or None,
        )

    @classmethod
    def _from_fabric_section(cls, data: dict[str, object]) -> FabricConfig:
        """Build from a raw YAML top-level dict (reads the ``fabric`` key)."""
        section = data.get("fabric", {})
        if not isinstance(section, dict):
            return cls()
        return cls(**{k: v for k, v in section.items() if k in cls.model_fields})

    @classmethod
    def from_file(cls, path: Path = CONFIG_PATH) -> FabricConfig:
        """Load config from a YAML file.  Returns empty config if file is missing."""
        if not path.is_file():
            return cls()
        logger.trace(f"Loading config from {path}")
        data = _load_raw_yaml(path)
        return cls._from_fabric_section(data)

    @classmethod
    def _overrides_from_env(cls) -> dict[str, object]:
        """Collect settings present in the environment."""
        values: dict[str, object] = {
            "api_root": os.environ.get("FABRIC_API_ROOT"),
            "token": os.environ.get("FABRIC_TOKEN"),
            "workspace_id": os.environ.get("FABRIC_WORKSPACE_ID"),
            "connection_timeout": _env_int("FABRIC_CONNECTION_TIMEOUT"),
            "read_timeout": _env_int("FABRIC_READ_TIMEOUT"),
        }
        return {k: v for k, v in values.items() if v not in (None, "")}

    @classmethod
    def from_env(cls) -> FabricConfig:
        """Build config from environment variables."""
        return cls(**cls._overrides_from_env())

    def merge(self, override: dict[str, object]) -> FabricConfig:
        """Return a copy where keys present in *override* take priority."""
        return FabricConfig(**{**self.model_dump(), **override})

    @classmethod
    def load(cls, config_path: Path | None = None) -> FabricConfig:
        """Merge preset, file, and env: preset < file < env."""
        preset_data = _load_preset_data()
        path = get_config_path(config_path)
        file_data = _load_raw_yaml(path).get("fabric")
        cfg = cls._from_fabric_section(preset_data)
        if isinstance(file_data, dict):
            cfg = cfg.merge(
                {k: v for k, v in file_data.items() if k in cls.model_fields}
            )
        return cfg.merge(cls._overrides_from_env())

    def save_to_file(self, path: Path = CONFIG_PATH) -> Path:
        """Write the ``fabric`` section to a YAML file, keeping other sections."""
        path.parent.mkdir(parents=True, exist_ok=True)
        existing = _load_raw_yaml(path)
        section: dict[str, object] = {"api_root": self.api_root}
        if self.token:
            section["token"] = self.token
        if self.token_type != "Bearer":
            section["token_type"] = self.token_type
        if self.workspace_id:
            section["workspace_id"] = self.workspace_id
        section["connection_timeout"] = self.connection_timeout
        section["read_timeout"] = self.read_timeout
        existing["fabric"] = section
        content = yaml.safe_dump(existing, default_flow_style=False, sort_keys=False)
        if not content.endswith("\n"):
            content += "\n"
        path.write_text(content, encoding="utf-8")
        logger.info(f"Config saved to {path}")
        return path


class ExportConfig(BaseModel):
    """Settings for CSV export of listings (column order as written)."""

    workspace_columns: list[str] = ["id", "display_name", "type", "capacity_id"]
    warehouse_columns: list[str] = [
        "workspace_id",
        "id",
        "display_name",
        "connection_string",
        "jdbc_url",
    ]


def _parse_export_section(raw: object) -> ExportConfig:
    """Parse ``export`` section from raw YAML value."""
    if not isinstance(raw, dict):
        return ExportConfig()
    filtered = {k: v for k, v in raw.items() if k in ExportConfig.model_fields}
    return ExportConfig(**filtered)


def load_export_config(config_path: Path | None = None) -> ExportConfig:
    """Load the ``export`` section from the config YAML."""
    raw = _load_raw_yaml(get_config_path(config_path)).get("export")
    return _parse_export_section(raw)
