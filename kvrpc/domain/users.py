"""User records handled by the REST front end."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr


class UserIn(BaseModel):
    """Body accepted by ``POST /users`` and ``PUT /users/{id}``; any ``id`` sent is ignored."""

    model_config = ConfigDict(extra="ignore")

    name: StrictStr
    age: StrictInt


class User(UserIn):
    id: StrictStr
