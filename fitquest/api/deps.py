from __future__ import annotations

from collections.abc import Generator

import redis
from fastapi import Depends, Header, HTTPException, status

from fitquest.auth import verify_token
from fitquest.errors import Unauthorized
from fitquest.infra.redis_client import create_redis


def get_redis() -> Generator[redis.Redis, None, None]:
    client = create_redis()
    try:
        yield client
    finally:
        try:
            client.close()
        except Exception:
            # Some redis client versions don't require explicit close.
            pass


def current_player_id(authorization: str | None = Header(default=None)) -> str:
    if not authorization:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No token provided")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")

    try:
        return verify_token(token)
    except Unauthorized as e:
        raise HTTPException(status_code=e.status_code, detail="Invalid or expired token") from e
