"""
User use cases for the REST front end.

The user map here is separate from the key/value store of the RPC back end;
only creation is forwarded there (as ``createUser``).
"""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Dict, Optional

from kvrpc.domain.users import User, UserIn
from kvrpc.services.rpc_client import RPCClient, RPCClientError

logger = logging.getLogger(__name__)


class UserError(Exception):
    """Base exception for user workflow."""


class UserNotFoundError(UserError):
    """Raised when the id is not in the user map."""


class UserForwardingError(UserError):
    """Raised when the back end did not accept a newly created user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UserService:
    """Keeps the front end's users and forwards creations over JSON-RPC."""

    def __init__(self, rpc_client: Optional[RPCClient] = None) -> None:
        self.rpc_client = rpc_client
        self._users: Dict[str, User] = {}
        self._lock = threading.Lock()

    def create(self, data: UserIn) -> User:
        user = User(id=str(uuid.uuid4()), name=data.name, age=data.age)
        with self._lock:
            self._users[user.id] = user
        if self.rpc_client is None:
            return user
        # Lock released: the outbound call must not block other requests.
        try:
            self.rpc_client.create_user(user.model_dump())
        except RPCClientError as exc:
            with self._lock:
                self._users.pop(user.id, None)
            logger.warning("createUser forwarding failed for %s: %s", user.id, exc)
            raise UserForwardingError(str(exc)) from exc
        logger.info("User %s created and forwarded", user.id)
        return user

    def list(self) -> Dict[str, User]:
        with self._lock:
            return dict(self._users)

    def get(self, user_id: str) -> User:
        with self._lock:
            user = self._users.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def replace(self, user_id: str, data: UserIn) -> User:
        user = User(id=user_id, name=data.name, age=data.age)
        with self._lock:
            self._users[user_id] = user
        return user

    def delete(self, user_id: str) -> None:
        with self._lock:
            if user_id not in self._users:
                raise UserNotFoundError(user_id)
            del self._users[user_id]
