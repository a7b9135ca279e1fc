#!/usr/bin/env python3
"""
Send one JSON-RPC call to the kv-rpc store and print the result.

Usage:
  python scripts/rpc_call.py post --key a --value 1
  python scripts/rpc_call.py get --key a [--url http://localhost:5001/rpc]
"""
from __future__ import annotations

import argparse
import sys

from kvrpc.core.config import get_settings
from kvrpc.services.rpc_client import RPCCallError, RPCClient, RPCClientError


def build_params(method: str, key: str | None, value: str | None) -> dict:
    if not key:
        raise SystemExit("--key is required")
    params = {"key": key}
    if method in ("post", "put"):
        if value is None:
            raise SystemExit(f"--value is required for {method}")
        params["value"] = value
    return params


def main() -> int:
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Call the kv-rpc JSON-RPC endpoint")
    ap.add_argument("method", choices=["get", "post", "put", "delete"])
    ap.add_argument("--key", help="record key")
    ap.add_argument("--value", help="record value (post/put)")
    ap.add_argument("--url", default=settings.rpc_url, help="JSON-RPC endpoint URL")
    args = ap.parse_args()

    params = build_params(args.method, args.key, args.value)
    with RPCClient(args.url, timeout=settings.rpc_timeout_seconds) as client:
        try:
            result = client.call(args.method, params)
        except RPCCallError as exc:
            sys.stderr.write(f"Error {exc.code}: {exc.message}\n")
            return 2
        except RPCClientError as exc:
            sys.stderr.write(f"Error: {exc}\n")
            return 1
    print(result)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
