"""
Configuration helpers for kv-rpc.

Settings are read from environment variables once and cached, so that
routers/services never fetch os.environ directly. Tests call
``get_settings.cache_clear()`` after patching the environment.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    rpc_host: str
    rpc_port: int
    rpc_path: str
    frontend_host: str
    frontend_port: int
    rpc_url: str
    rpc_timeout_seconds: float
    legacy_error_codes: bool
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _float(value: str, default: float = 0.0) -> float:
        try:
            return float(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    def _path(value: str | None, default: str) -> str:
        path = (value or default).strip().rstrip("/")
        if not path.startswith("/"):
            path = "/" + path
        return path if path != "/" else default

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        rpc_host=os.getenv("RPC_HOST", "127.0.0.1"),
        rpc_port=_int(os.getenv("RPC_PORT", "5001"), 5001),
        rpc_path=_path(os.getenv("RPC_PATH"), "/rpc"),
        frontend_host=os.getenv("FRONTEND_HOST", "127.0.0.1"),
        frontend_port=_int(os.getenv("FRONTEND_PORT", "8080"), 8080),
        rpc_url=os.getenv("RPC_URL", "http://localhost:5001/rpc").rstrip("/"),
        rpc_timeout_seconds=_float(os.getenv("RPC_TIMEOUT_SECONDS", "10"), 10.0),
        legacy_error_codes=_bool(os.getenv("RPC_LEGACY_ERROR_CODES"), False),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
