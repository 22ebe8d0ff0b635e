from __future__ import annotations

import logging
import secrets
from contextlib import contextmanager

import redis

from fitquest.errors import PlayerBusy, StorageError


logger = logging.getLogger(__name__)

# Delete the key only if it still holds our token, so an expired holder
# never releases a lock that another request has since acquired.
_RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
end
return 0
"""


def _lock_key(player_id: str) -> str:
    return f"lock:player:{player_id}"


@contextmanager
def player_lock(*, r: redis.Redis, player_id: str, ttl_ms: int = 5_000):
    """Per-player mutual exclusion for read-modify-write of the player document.

    Raises PlayerBusy instead of waiting; callers surface it as a retryable conflict.
    A failed release is only logged: the key still expires after `ttl_ms`, and
    the outcome of the guarded block has already been decided.
    """

    key = _lock_key(player_id)
    token = secrets.token_hex(16)
    try:
        acquired = r.set(key, token, nx=True, px=ttl_ms)
    except redis.RedisError as e:
        logger.warning("failed to acquire lock for player %s: %s", player_id, e)
        raise StorageError("Could not lock player") from e
    if not acquired:
        raise PlayerBusy("Player is busy, try again")
    try:
        yield token
    finally:
        try:
            r.eval(_RELEASE_SCRIPT, 1, key, token)
        except redis.RedisError as e:
            logger.warning("failed to release lock for player %s: %s", player_id, e)
