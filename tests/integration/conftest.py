"""Integration test helpers: a FabricClient talking to a live tenant."""

from __future__ import annotations

import os

import pytest

from fabriclink.client import FabricClient
from fabriclink.config import DEFAULT_API_ROOT, FabricConfig

pytestmark = pytest.mark.integration


def _env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


@pytest.fixture(scope="session")
def live_client() -> FabricClient:
    """Client configured from FABRIC_INTEGRATION_* env vars."""
    token = _env("FABRIC_INTEGRATION_TOKEN")
    if not token:
        pytest.skip("FABRIC_INTEGRATION_TOKEN is not set")
    cfg = FabricConfig(
        api_root=_env("FABRIC_INTEGRATION_API_ROOT", DEFAULT_API_ROOT),
        token=token,
    )
    return FabricClient(cfg)
