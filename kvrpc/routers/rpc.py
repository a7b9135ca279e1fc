from __future__ import annotations

import json
import logging
from typing import Iterable

from fastapi import APIRouter, HTTPException, Request, Response
from starlette.concurrency import run_in_threadpool

from kvrpc.services.rpc_service import RPCDispatcher

logger = logging.getLogger(__name__)


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def _get_dispatcher(request: Request) -> RPCDispatcher:
    svc = getattr(getattr(request.app, "state", None), "dispatcher", None)
    if not svc:
        raise RuntimeError("RPCDispatcher not configured")
    return svc


async def rpc_endpoint(request: Request) -> Response:
    body = await request.body()
    try:
        payload = json.loads(body, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        # UnicodeDecodeError is a ValueError too; RecursionError on absurd nesting
        raise HTTPException(400, "Invalid request")

    dispatcher = _get_dispatcher(request)
    # Storage waits on a thread lock; keep it off the event loop.
    result = await run_in_threadpool(dispatcher.handle, payload)

    try:
        content = json.dumps(result.to_dict(), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError):
        logger.exception("Failed to encode response for id=%r", getattr(result, "id", None))
        raise HTTPException(500, "Failed to encode response")
    return Response(content=content, media_type="application/json")


def build_router(paths: Iterable[str]) -> APIRouter:
    """Serve the JSON-RPC endpoint on every path given."""
    router = APIRouter(tags=["rpc"])
    for path in dict.fromkeys(paths):
        router.add_api_route(path, rpc_endpoint, methods=["POST"], include_in_schema=True)
    return router


health_router = APIRouter(tags=["health"])


@health_router.get("/health")
def health(request: Request):
    dispatcher = _get_dispatcher(request)
    storage = dispatcher.storage
    body = {"status": "ok", "methods": dispatcher.methods()}
    if hasattr(storage, "__len__"):
        body["keys"] = len(storage)
    return body
