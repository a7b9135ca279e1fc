"""JSON-RPC back end: owns the key/value store and serves the dispatcher over HTTP."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI

from kvrpc.core.config import Settings, get_settings
from kvrpc.core.log import RequestLoggingMiddleware
from kvrpc.repositories.storage import InMemoryStorage, Storage
from kvrpc.routers import rpc as rpc_router
from kvrpc.services.rpc_service import RPCDispatcher

logger = logging.getLogger(__name__)

# Path the users front end of the first release posted to.
LEGACY_RPC_PATH = "/json-rpc"


def create_app(storage: Optional[Storage] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Build an isolated back-end app; each call gets its own store unless one is passed in."""
    settings = settings or get_settings()
    storage = storage if storage is not None else InMemoryStorage()

    app = FastAPI(title="kv-rpc store")
    app.state.settings = settings
    app.state.dispatcher = RPCDispatcher(storage, legacy_error_codes=settings.legacy_error_codes)

    app.add_middleware(RequestLoggingMiddleware, service="rpc")
    app.include_router(rpc_router.build_router([settings.rpc_path, LEGACY_RPC_PATH]))
    app.include_router(rpc_router.health_router)

    logger.info(
        "RPC app ready on %s (storage=%s, legacy_error_codes=%s)",
        settings.rpc_path,
        type(storage).__name__,
        settings.legacy_error_codes,
    )
    return app
