"""REST front end for user records; forwards new users to the JSON-RPC back end."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from kvrpc.core.config import Settings, get_settings
from kvrpc.core.log import RequestLoggingMiddleware
from kvrpc.routers import users as users_router
from kvrpc.services.rpc_client import RPCClient
from kvrpc.services.user_service import UserService

logger = logging.getLogger(__name__)


async def _bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": ".".join(str(p) for p in err.get("loc", ())), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse({"detail": errors}, status_code=400)


def create_frontend_app(
    user_service: Optional[UserService] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Build the users app. Without a service, one is wired to ``settings.rpc_url``."""
    settings = settings or get_settings()
    rpc_client: Optional[RPCClient] = None
    if user_service is None:
        rpc_client = RPCClient(settings.rpc_url, timeout=settings.rpc_timeout_seconds)
        user_service = UserService(rpc_client)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        if rpc_client is not None:
            rpc_client.close()

    app = FastAPI(title="kv-rpc users", lifespan=lifespan)
    app.state.settings = settings
    app.state.user_service = user_service

    app.add_middleware(RequestLoggingMiddleware, service="frontend")
    app.add_exception_handler(RequestValidationError, _bad_request)
    app.include_router(users_router.router)

    logger.info("Users app ready (rpc_url=%s)", settings.rpc_url)
    return app
