"""
Request identity.

Authentication is not implemented yet. Callers name themselves with the
``X-User-Id`` header, and the id is resolved to an existing user before any
mutation runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException

from filmhub.db import DbClient
from filmhub.dependencies import get_db_client
from filmhub.types import USER_ID_HEADER


@dataclass(frozen=True)
class Identity:
    user_id: str


def get_identity(
    x_user_id: Optional[str] = Header(default=None, alias=USER_ID_HEADER),
    db: DbClient = Depends(get_db_client),
) -> Identity:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing user identity")
    user = db.get_user(x_user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Unknown user")
    return Identity(user_id=user.id)
