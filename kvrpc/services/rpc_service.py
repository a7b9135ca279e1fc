"""JSON-RPC dispatcher: validates a request, runs one storage operation, builds the response."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Tuple, Type

from pydantic import BaseModel, ValidationError

from kvrpc.domain.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    KEY_NOT_FOUND,
    LEGACY_APPLICATION_ERROR,
    METHOD_NOT_FOUND,
    STORAGE_ERROR,
    SUCCESS,
    KeyParams,
    KeyValueParams,
    RPCRequest,
    RPCResponse,
    UserParams,
    describe_validation_error,
)
from kvrpc.repositories.storage import KeyNotFoundError, Storage, StorageError

logger = logging.getLogger(__name__)

MethodHandler = Callable[[Any], str]


class RPCDispatcher:
    """Routes JSON-RPC requests to a ``Storage`` backend.

    The dispatcher keeps no state between calls; the store it is given is
    the only shared resource. With ``legacy_error_codes`` every storage
    failure is reported with code 1 instead of the server-error range.
    """

    def __init__(self, storage: Storage, *, legacy_error_codes: bool = False) -> None:
        self.storage = storage
        self.legacy_error_codes = legacy_error_codes
        self._methods: Dict[str, Tuple[Type[BaseModel], MethodHandler]] = {
            "get": (KeyParams, self._get),
            "post": (KeyValueParams, self._post),
            "put": (KeyValueParams, self._put),
            "delete": (KeyParams, self._delete),
            "createUser": (UserParams, self._create_user),
        }

    def methods(self) -> List[str]:
        return sorted(self._methods)

    def handle(self, payload: Any) -> RPCResponse:
        if not isinstance(payload, dict):
            return RPCResponse.failure(None, INVALID_REQUEST, data="request must be a JSON object")
        try:
            request = RPCRequest.model_validate(payload)
        except ValidationError as exc:
            return RPCResponse.failure(
                payload.get("id"), INVALID_REQUEST, data=describe_validation_error(exc)
            )

        entry = self._methods.get(request.method)
        if entry is None:
            logger.debug("Unknown method %r (id=%r)", request.method, request.id)
            return RPCResponse.failure(request.id, METHOD_NOT_FOUND)
        schema, handler = entry

        try:
            params = schema.model_validate(request.params)
        except ValidationError as exc:
            logger.debug("Invalid params for %s (id=%r)", request.method, request.id)
            return RPCResponse.failure(
                request.id, INVALID_PARAMS, data=describe_validation_error(exc)
            )

        try:
            result = handler(params)
        except StorageError as exc:
            return RPCResponse.failure(request.id, self._error_code(exc), exc.message)
        except Exception:
            logger.exception("Unhandled error while running %s (id=%r)", request.method, request.id)
            return RPCResponse.failure(request.id, INTERNAL_ERROR)

        logger.debug("%s ok (id=%r)", request.method, request.id)
        return RPCResponse.success(request.id, result)

    def _error_code(self, exc: StorageError) -> int:
        if self.legacy_error_codes:
            return LEGACY_APPLICATION_ERROR
        if isinstance(exc, KeyNotFoundError):
            return KEY_NOT_FOUND
        return STORAGE_ERROR

    # -------------------------- methods --------------------------
    def _get(self, params: KeyParams) -> str:
        return self.storage.get(params.key)

    def _post(self, params: KeyValueParams) -> str:
        self.storage.post(params.key, params.value)
        return SUCCESS

    def _put(self, params: KeyValueParams) -> str:
        self.storage.put(params.key, params.value)
        return SUCCESS

    def _delete(self, params: KeyParams) -> str:
        self.storage.delete(params.key)
        return SUCCESS

    def _create_user(self, params: UserParams) -> str:
        # Same upsert as ``post``, keyed by the id the front end assigned.
        self.storage.post(params.id, params.model_dump_json())
        return SUCCESS
