"""
JSON-RPC client used by the users front end and the command line script.

Every call is a single attempt: transport failures and error responses are
raised to the caller as they happen.
"""

from __future__ import annotations

import itertools
import logging
import threading
from typing import Any, Dict, Optional

import httpx

from kvrpc.domain.jsonrpc import JSONRPC_VERSION

logger = logging.getLogger(__name__)


class RPCClientError(Exception):
    """Base class for failures seen by the client."""


class RPCTransportError(RPCClientError):
    """The call never produced a JSON-RPC response (network, HTTP status, bad body)."""


class RPCCallError(RPCClientError):
    """The server answered with a JSON-RPC error object."""

    def __init__(self, code: int, message: str, data: Any = None):
        super().__init__(f"{message} (code {code})")
        self.code = code
        self.message = message
        self.data = data


class RPCClient:
    """Posts JSON-RPC envelopes to a single endpoint.

    ``http_client`` can be any ``httpx.Client`` (including FastAPI's
    ``TestClient``); when omitted the client owns one and closes it in
    ``close()``.
    """

    def __init__(
        self,
        url: str,
        http_client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ) -> None:
        self.url = url
        self._owns_http = http_client is None
        self._http = http_client or httpx.Client(timeout=timeout)
        self._ids = itertools.count(1)
        self._ids_lock = threading.Lock()

    def _next_id(self) -> int:
        with self._ids_lock:
            return next(self._ids)

    def call(self, method: str, params: Optional[Dict[str, Any]] = None) -> Any:
        request_id = self._next_id()
        envelope = {
            "jsonrpc": JSONRPC_VERSION,
            "id": request_id,
            "method": method,
            "params": params or {},
        }
        try:
            resp = self._http.post(self.url, json=envelope)
        except httpx.HTTPError as exc:
            raise RPCTransportError(f"{method}: request to {self.url} failed: {exc}") from exc
        if resp.status_code != 200:
            raise RPCTransportError(f"{method}: HTTP {resp.status_code} from {self.url}: {resp.text.strip()}")
        try:
            body = resp.json()
        except ValueError as exc:
            raise RPCTransportError(f"{method}: response is not JSON") from exc
        if not isinstance(body, dict):
            raise RPCTransportError(f"{method}: response is not a JSON-RPC object")

        error = body.get("error")
        if error is not None:
            if not isinstance(error, dict):
                raise RPCTransportError(f"{method}: malformed error member")
            code = error.get("code")
            if not isinstance(code, int) or isinstance(code, bool):
                raise RPCTransportError(f"{method}: malformed error member")
            raise RPCCallError(code, str(error.get("message", "")), error.get("data"))
        if "result" not in body:
            raise RPCTransportError(f"{method}: response carries neither result nor error")
        logger.debug("%s -> id=%s ok", method, body.get("id"))
        return body["result"]

    def get(self, key: str) -> str:
        return self.call("get", {"key": key})

    def post(self, key: str, value: str) -> str:
        return self.call("post", {"key": key, "value": value})

    def put(self, key: str, value: str) -> str:
        return self.call("put", {"key": key, "value": value})

    def delete(self, key: str) -> str:
        return self.call("delete", {"key": key})

    def create_user(self, user: Dict[str, Any]) -> str:
        return self.call("createUser", user)

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "RPCClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
