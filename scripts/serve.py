#!/usr/bin/env python3
"""
Run the JSON-RPC store or the users front end under uvicorn.

Usage:
  python scripts/serve.py rpc [--host 127.0.0.1] [--port 5001] [--log-level DEBUG]
  python scripts/serve.py frontend [--port 8080]
"""
from __future__ import annotations

import argparse
import logging

import uvicorn

from kvrpc.core.config import get_settings
from kvrpc.core.log import setup_logging

FACTORIES = {
    "rpc": "kvrpc.app_factory:create_app",
    "frontend": "kvrpc.app_factory:create_frontend_app",
}


def main() -> None:
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Start a kv-rpc service")
    ap.add_argument("service", choices=sorted(FACTORIES), help="which app to run")
    ap.add_argument("--host", help="bind address (default from RPC_HOST / FRONTEND_HOST)")
    ap.add_argument("--port", type=int, help="port (default from RPC_PORT / FRONTEND_PORT)")
    ap.add_argument("--log-level", default=settings.log_level, help="logging level")
    args = ap.parse_args()

    if args.service == "rpc":
        host = args.host or settings.rpc_host
        port = args.port or settings.rpc_port
    else:
        host = args.host or settings.frontend_host
        port = args.port or settings.frontend_port

    setup_logging(args.log_level)
    logging.getLogger(__name__).info("Starting %s on %s:%s", args.service, host, port)
    uvicorn.run(
        FACTORIES[args.service],
        factory=True,
        host=host,
        port=port,
        log_level=args.log_level.lower(),
    )


if __name__ == "__main__":
    main()
