"""Shared fixtures: fresh settings, an isolated store and the apps built on it."""
from __future__ import annotations

import dataclasses
import sys
from pathlib import Path

import pytest

# Makes the kvrpc package importable when running from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fastapi.testclient import TestClient  # noqa: E402

from kvrpc.app import create_app  # noqa: E402
from kvrpc.core import config as core_config  # noqa: E402
from kvrpc.repositories.storage import InMemoryStorage  # noqa: E402
from kvrpc.services.rpc_service import RPCDispatcher  # noqa: E402

ENV_VARS = (
    "APP_ENV",
    "RPC_HOST",
    "RPC_PORT",
    "RPC_PATH",
    "FRONTEND_HOST",
    "FRONTEND_PORT",
    "RPC_URL",
    "RPC_TIMEOUT_SECONDS",
    "RPC_LEGACY_ERROR_CODES",
    "LOG_LEVEL",
)


@pytest.fixture()
def clean_env(monkeypatch):
    """Drop kv-rpc env vars and reset the settings cache before and after the test."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    core_config.get_settings.cache_clear()
    yield monkeypatch
    core_config.get_settings.cache_clear()


@pytest.fixture()
def settings(clean_env):
    return core_config.get_settings()


@pytest.fixture()
def legacy_settings(settings):
    return dataclasses.replace(settings, legacy_error_codes=True)


@pytest.fixture()
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture()
def dispatcher(storage) -> RPCDispatcher:
    return RPCDispatcher(storage)


@pytest.fixture()
def rpc_app(storage, settings):
    return create_app(storage=storage, settings=settings)


@pytest.fixture()
def rpc_http(rpc_app) -> TestClient:
    return TestClient(rpc_app)

