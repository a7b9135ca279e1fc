from __future__ import annotations

from typing import Dict

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse

from kvrpc.domain.users import User, UserIn
from kvrpc.services.user_service import (
    UserForwardingError,
    UserNotFoundError,
    UserService,
)

router = APIRouter(prefix="/users", tags=["users"])


def _get_user_service(request: Request) -> UserService:
    svc = getattr(getattr(request.app, "state", None), "user_service", None)
    if not svc:
        raise RuntimeError("UserService not configured")
    return svc


@router.post("", status_code=201, response_model=User)
def create_user(payload: UserIn, request: Request):
    svc = _get_user_service(request)
    try:
        return svc.create(payload)
    except UserForwardingError as exc:
        raise HTTPException(502, exc.message)


@router.get("", response_model=Dict[str, User])
def list_users(request: Request):
    return _get_user_service(request).list()


@router.get("/{user_id}", response_model=User)
def get_user(user_id: str, request: Request):
    try:
        return _get_user_service(request).get(user_id)
    except UserNotFoundError:
        raise HTTPException(404, "User not found")


@router.put("/{user_id}", response_model=User)
def update_user(user_id: str, payload: UserIn, request: Request):
    return _get_user_service(request).replace(user_id, payload)


@router.delete("/{user_id}", response_class=PlainTextResponse)
def delete_user(user_id: str, request: Request):
    try:
        _get_user_service(request).delete(user_id)
    except UserNotFoundError:
        raise HTTPException(404, "User not found")
    return "User deleted"
