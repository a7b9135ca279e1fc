from __future__ import annotations

import json
import logging

import pytest

from kvrpc.domain.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    KEY_NOT_FOUND,
    LEGACY_APPLICATION_ERROR,
    METHOD_NOT_FOUND,
    STORAGE_ERROR,
)
from kvrpc.repositories.storage import InMemoryStorage, StorageError
from kvrpc.services.rpc_service import RPCDispatcher


def call(dispatcher, method, params=None, request_id=1) -> dict:
    payload = {"jsonrpc": "2.0", "id": request_id, "method": method}
    if params is not None:
        payload["params"] = params
    return dispatcher.handle(payload).to_dict()


class BrokenStorage(InMemoryStorage):
    def get(self, key: str) -> str:
        raise RuntimeError("disk on fire")

    def put(self, key: str, value: str) -> None:
        raise StorageError("read-only backend")


def test_post_get_delete_scenario(dispatcher):
    assert call(dispatcher, "post", {"key": "a", "value": "1"}) == {"jsonrpc": "2.0", "id": 1, "result": "success"}
    assert call(dispatcher, "get", {"key": "a"})["result"] == "1"
    assert call(dispatcher, "delete", {"key": "a"})["result"] == "success"

    body = call(dispatcher, "get", {"key": "a"})
    assert "result" not in body
    assert body["error"] == {"code": KEY_NOT_FOUND, "message": "key not found"}


def test_scenario_with_legacy_error_codes(storage):
    dispatcher = RPCDispatcher(storage, legacy_error_codes=True)
    call(dispatcher, "post", {"key": "a", "value": "1"})
    call(dispatcher, "delete", {"key": "a"})
    body = call(dispatcher, "get", {"key": "a"})
    assert body["error"]["code"] == LEGACY_APPLICATION_ERROR == 1
    assert body["error"]["message"] == "key not found"


def test_put_twice_returns_latest_value(dispatcher):
    call(dispatcher, "put", {"key": "k", "value": "v1"})
    call(dispatcher, "put", {"key": "k", "value": "v2"})
    assert call(dispatcher, "get", {"key": "k"})["result"] == "v2"


def test_delete_never_written_key_is_an_error(dispatcher):
    body = call(dispatcher, "delete", {"key": "ghost"})
    assert body["error"]["code"] == KEY_NOT_FOUND
    assert "result" not in body


def test_unknown_method_is_method_not_found(dispatcher):
    body = call(dispatcher, "increment", {"key": "a"}, request_id="req-7")
    assert body["id"] == "req-7"
    assert body["error"] == {"code": METHOD_NOT_FOUND, "message": "Method not found"}
    assert "result" not in body


def test_method_names_are_case_sensitive(dispatcher):
    assert call(dispatcher, "GET", {"key": "a"})["error"]["code"] == METHOD_NOT_FOUND


@pytest.mark.parametrize(
    "method, params, field",
    [
        ("get", {}, "key"),
        ("get", {"key": 5}, "key"),
        ("delete", {"key": None}, "key"),
        ("post", {"key": "a"}, "value"),
        ("put", {"key": "a", "value": 1}, "value"),
        ("post", {"value": "1"}, "key"),
    ],
)
def test_bad_params_are_invalid_params(dispatcher, method, params, field):
    body = call(dispatcher, method, params)
    assert body["error"]["code"] == INVALID_PARAMS
    assert body["error"]["message"] == "Invalid params"
    assert field in [d["field"] for d in body["error"]["data"]]
    assert "result" not in body


@pytest.mark.parametrize("params", [None, ["a", "1"], "a"])
def test_params_must_be_an_object(dispatcher, params):
    payload = {"jsonrpc": "2.0", "id": 3, "method": "get", "params": params}
    body = dispatcher.handle(payload).to_dict()
    assert body["error"]["code"] == INVALID_PARAMS


def test_bad_params_do_not_touch_the_store(dispatcher, storage):
    call(dispatcher, "post", {"key": "a", "value": 1})
    assert len(storage) == 0


def test_extra_params_are_ignored(dispatcher):
    body = call(dispatcher, "post", {"key": "a", "value": "1", "ttl": 30})
    assert body["result"] == "success"


@pytest.mark.parametrize("payload", [[], [1, 2], "get", 42, None])
def test_non_object_payload_is_invalid_request(dispatcher, payload):
    body = dispatcher.handle(payload).to_dict()
    assert body["id"] is None
    assert body["error"]["code"] == INVALID_REQUEST


def test_missing_method_is_invalid_request_and_echoes_id(dispatcher):
    body = dispatcher.handle({"jsonrpc": "2.0", "id": 9, "params": {"key": "a"}}).to_dict()
    assert body["id"] == 9
    assert body["error"]["code"] == INVALID_REQUEST


def test_id_is_echoed_as_given(dispatcher):
    for request_id in (0, "abc", None, 12.5):
        body = call(dispatcher, "post", {"key": "a", "value": "1"}, request_id=request_id)
        assert body["id"] == request_id
    body = dispatcher.handle({"method": "post", "params": {"key": "a", "value": "1"}}).to_dict()
    assert body["id"] is None
    assert body["result"] == "success"


def test_create_user_stores_user_under_its_id(dispatcher, storage):
    user = {"id": "u-1", "name": "Ann", "age": 30}
    body = call(dispatcher, "createUser", user)
    assert body["result"] == "success"
    assert json.loads(storage.get("u-1")) == user


def test_create_user_requires_typed_fields(dispatcher):
    body = call(dispatcher, "createUser", {"id": "u-1", "name": "Ann", "age": "30"})
    assert body["error"]["code"] == INVALID_PARAMS


def test_unexpected_exception_becomes_internal_error(caplog):
    dispatcher = RPCDispatcher(BrokenStorage())
    with caplog.at_level(logging.ERROR, logger="kvrpc.services.rpc_service"):
        body = call(dispatcher, "get", {"key": "a"})
    assert body["error"] == {"code": INTERNAL_ERROR, "message": "Internal error"}
    assert "disk on fire" in caplog.text


def test_other_storage_errors_use_server_error_code():
    dispatcher = RPCDispatcher(BrokenStorage())
    body = call(dispatcher, "put", {"key": "a", "value": "1"})
    assert body["error"] == {"code": STORAGE_ERROR, "message": "read-only backend"}


def test_methods_lists_registered_names(dispatcher):
    assert dispatcher.methods() == ["createUser", "delete", "get", "post", "put"]
