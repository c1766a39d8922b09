"""
security.py — password hashing and access tokens.

Passwords: Argon2id via argon2-cffi, stored as a PHC string
           ($argon2id$v=19$m=...,t=...,p=...$<salt>$<hash>).
Tokens:    HS256 JWT {sub: "<user id>", iat, exp} signed with settings.secret_key.

hash_password/verify_password are CPU and memory heavy; async callers run
them through run_in_threadpool.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from argon2.low_level import Type

from voltmap.config import settings
from voltmap.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

_ALGORITHM = "HS256"

_hasher = PasswordHasher(
    time_cost=2,
    memory_cost=19456,
    parallelism=1,
    hash_len=32,
    salt_len=16,
    type=Type.ID,
)


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password: str, stored: str) -> bool:
    try:
        return _hasher.verify(stored, password)
    except VerifyMismatchError:
        return False
    except (InvalidHashError, VerificationError):
        logger.warning("Malformed password hash encountered")
        return False


def create_access_token(user_id: int, ttl_seconds: Optional[int] = None) -> str:
    now = datetime.now(timezone.utc)
    ttl = settings.token_ttl_seconds if ttl_seconds is None else ttl_seconds
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + timedelta(seconds=ttl),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=_ALGORITHM)


def decode_access_token(token: str) -> int:
    """
    Return the user id carried by a valid token.

    Raises:
        AuthenticationError: expired, tampered, or malformed token.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[_ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError("Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthenticationError() from exc

    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError) as exc:
        raise AuthenticationError() from exc
