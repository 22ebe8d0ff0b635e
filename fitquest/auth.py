from __future__ import annotations

import base64
import hashlib
import hmac
import json
import logging
import secrets
import time

import redis

from fitquest.api.models import PlayerRecord
from fitquest.config import get_settings
from fitquest.errors import PreconditionFailed, StorageError, Unauthorized
from fitquest.player_store import new_player, require_player, save_player


logger = logging.getLogger(__name__)

CREDENTIALS_KEY_PREFIX = "fitquest:credentials:"  # + {email}

_PBKDF2_ITERATIONS = 200_000


def _b64(b: bytes) -> str:
    return base64.urlsafe_b64encode(b).decode().rstrip("=")


def _ub64(s: str) -> bytes:
    pad = "=" * ((4 - (len(s) % 4)) % 4)
    return base64.urlsafe_b64decode((s + pad).encode())


def _credentials_key(email: str) -> str:
    return f"{CREDENTIALS_KEY_PREFIX}{email}"


def normalize_email(email: str) -> str:
    return email.strip().casefold()


def hash_password(password: str, *, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode(), salt, _PBKDF2_ITERATIONS)


# ---- signed bearer tokens (HMAC-SHA256 over a JSON payload) ----


def issue_token(player_id: str, *, ttl_s: int | None = None, now: float | None = None) -> str:
    settings = get_settings()
    issued = time.time() if now is None else now
    payload = {"sub": player_id, "exp": int(issued) + (ttl_s if ttl_s is not None else settings.token_ttl_s)}
    p = _b64(json.dumps(payload, separators=(",", ":")).encode())
    sig = hmac.new(settings.token_secret.encode(), p.encode(), hashlib.sha256).digest()
    return f"{p}.{_b64(sig)}"


def verify_token(token: str, *, now: float | None = None) -> str:
    """Return the player id a token was issued for, or raise Unauthorized."""

    settings = get_settings()
    try:
        p, sig = token.split(".")
        expected = hmac.new(settings.token_secret.encode(), p.encode(), hashlib.sha256).digest()
        if not hmac.compare_digest(expected, _ub64(sig)):
            raise Unauthorized("bad signature")
        payload = json.loads(_ub64(p).decode())
        exp = int(payload["exp"])
        player_id = str(payload["sub"])
    except Unauthorized:
        raise
    except (ValueError, KeyError, TypeError) as e:
        raise Unauthorized("malformed token") from e

    if exp < (time.time() if now is None else now):
        raise Unauthorized("expired")
    return player_id


# ---- credential store ----


def _release_email(r: redis.Redis, key: str) -> None:
    try:
        r.delete(key)
    except redis.RedisError as e:
        logger.error("failed to release credentials %s after a failed registration: %s", key, e)


def register(*, r: redis.Redis, email: str, password: str, hero_name: str) -> PlayerRecord:
    email = normalize_email(email)
    key = _credentials_key(email)
    player = new_player(email=email, hero_name=hero_name)

    # HSETNX claims the email atomically; a concurrent duplicate loses here.
    try:
        claimed = r.hsetnx(key, "player_id", player.player_id)
    except redis.RedisError as e:
        logger.warning("failed to claim email for registration: %s", e)
        raise StorageError("Could not register user") from e
    if not claimed:
        raise PreconditionFailed("Email already exists")

    # Anything failing past the claim must give the email back.
    salt = secrets.token_bytes(16)
    try:
        r.hset(key, mapping={"salt": salt.hex(), "password_hash": hash_password(password, salt=salt).hex()})
        save_player(r=r, player=player)
    except StorageError:
        _release_email(r, key)
        raise
    except redis.RedisError as e:
        logger.warning("failed to store credentials for %s: %s", player.player_id, e)
        _release_email(r, key)
        raise StorageError("Could not register user") from e

    logger.info("registered player %s", player.player_id)
    return player


def login(*, r: redis.Redis, email: str, password: str) -> tuple[str, PlayerRecord]:
    try:
        creds = r.hgetall(_credentials_key(normalize_email(email)))
    except redis.RedisError as e:
        logger.warning("failed to load credentials: %s", e)
        raise StorageError("Could not load credentials") from e
    if not creds or "password_hash" not in creds:
        raise PreconditionFailed("User not found")

    got = hash_password(password, salt=bytes.fromhex(creds["salt"]))
    if not hmac.compare_digest(bytes.fromhex(creds["password_hash"]), got):
        raise PreconditionFailed("Incorrect password")

    player = require_player(r=r, player_id=creds["player_id"])
    return issue_token(player.player_id), player
