"""
dependencies.py — get_current_user FastAPI dependency.

An explicit "Authorization: Bearer" header (API clients) wins over the auth
cookie (browser client). Any failure is a 401.
"""
from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from voltmap.api.auth.security import decode_access_token
from voltmap.config import settings
from voltmap.database import get_db
from voltmap.exceptions import AuthenticationError
from voltmap.models.user import UserORM
from voltmap.store import get_user

_bearer = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    db: AsyncSession = Depends(get_db),
) -> UserORM:
    if credentials is not None:
        token = credentials.credentials
    else:
        token = request.cookies.get(settings.cookie_name)
    if not token:
        raise AuthenticationError()

    user_id = decode_access_token(token)
    user = await get_user(db, user_id)
    if user is None:
        raise AuthenticationError()
    return user
