"""Workspace listing cached as YAML next to the config file.

The file holds full ``Workspace`` records in their camelCase wire form, so
a cached entry reads back exactly like one fetched from the API.  A file
that does not validate is ignored as a whole; the next listing rewrites it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import yaml
from loguru import logger
from pydantic import BaseModel, ValidationError

from fabriclink.config import get_workspaces_cache_path
from fabriclink.models import Workspace

if TYPE_CHECKING:
    from pathlib import Path


class WorkspacesCache(BaseModel):
    """Contents of the workspaces cache file."""

    workspaces: list[Workspace] = []

    def dump_yaml(self) -> str:
        """Serialize the records by alias, leaving out unset fields."""
        data = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)


def load_workspaces_cache(path: Path | None = None) -> list[Workspace]:
    """Return cached workspaces, or ``[]`` when the cache is absent or unusable."""
    cache_path = path if path is not None else get_workspaces_cache_path()
    if not cache_path.is_file():
        return []
    try:
        data = yaml.safe_load(cache_path.read_text(encoding="utf-8"))
        cache = WorkspacesCache.model_validate(data or {})
    except (OSError, yaml.YAMLError, ValidationError) as e:
        logger.warning(f"Ignoring workspaces cache {cache_path}: {e}")
        return []
    return cache.workspaces


def save_workspaces_cache(
    workspaces: list[Workspace], path: Path | None = None
) -> Path:
    """Replace the cache with *workspaces*. Creates the parent dir if needed."""
    cache_path = path if path is not None else get_workspaces_cache_path()
    cache_path.parent.mkdir(parents=True, exist_ok=True)
    cache_path.write_text(
        WorkspacesCache(workspaces=workspaces).dump_yaml(), encoding="utf-8"
    )
    logger.trace(f"Cached {len(workspaces)} workspace(s) in {cache_path}")
    return cache_path
