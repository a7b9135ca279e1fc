"""JSON-RPC 2.0 envelopes, per-method params and error codes."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr, ValidationError

JSONRPC_VERSION = "2.0"

# Reserved by JSON-RPC 2.0
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Server-defined range (-32000..-32099)
STORAGE_ERROR = -32000
KEY_NOT_FOUND = -32001

# Code the first version of the service used for every domain error.
LEGACY_APPLICATION_ERROR = 1

ERROR_MESSAGES = {
    PARSE_ERROR: "Parse error",
    INVALID_REQUEST: "Invalid Request",
    METHOD_NOT_FOUND: "Method not found",
    INVALID_PARAMS: "Invalid params",
    INTERNAL_ERROR: "Internal error",
}

SUCCESS = "success"


class RPCRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    jsonrpc: StrictStr = JSONRPC_VERSION
    id: Any = None
    method: StrictStr
    params: Any = None


class KeyParams(BaseModel):
    """Params for ``get`` and ``delete``."""

    model_config = ConfigDict(extra="ignore")

    key: StrictStr


class KeyValueParams(KeyParams):
    """Params for ``post`` and ``put``."""

    value: StrictStr


class UserParams(BaseModel):
    """Params for ``createUser``, as sent by the users front end."""

    model_config = ConfigDict(extra="ignore")

    id: StrictStr
    name: StrictStr
    age: StrictInt


class RPCError(BaseModel):
    code: int
    message: str
    data: Any = None

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            body["data"] = self.data
        return body


class RPCResponse(BaseModel):
    jsonrpc: str = JSONRPC_VERSION
    id: Any = None
    result: Optional[str] = None
    error: Optional[RPCError] = None

    @classmethod
    def success(cls, request_id: Any, result: str) -> "RPCResponse":
        return cls(id=request_id, result=result)

    @classmethod
    def failure(cls, request_id: Any, code: int, message: str | None = None, data: Any = None) -> "RPCResponse":
        text = message if message is not None else ERROR_MESSAGES.get(code, "Server error")
        return cls(id=request_id, error=RPCError(code=code, message=text, data=data))

    def to_dict(self) -> Dict[str, Any]:
        """Wire form: ``id`` is always present, exactly one of result/error."""
        body: Dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            body["error"] = self.error.to_dict()
        else:
            body["result"] = self.result
        return body


def describe_validation_error(exc: ValidationError) -> List[Dict[str, str]]:
    """Reduce pydantic errors to JSON-safe ``{field, message}`` pairs."""
    details = []
    for err in exc.errors(include_url=False):
        field = ".".join(str(part) for part in err.get("loc", ())) or "params"
        details.append({"field": field, "message": err.get("msg", "invalid value")})
    return details
