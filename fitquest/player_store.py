from __future__ import annotations

import logging
from datetime import UTC, datetime
from uuid import uuid4

import redis

from fitquest.api.models import PlayerRecord, Stats
from fitquest.errors import NotFound, StorageError


logger = logging.getLogger(__name__)

PLAYERS_SET_KEY = "fitquest:players"
PLAYER_KEY_PREFIX = "fitquest:player:"  # + {player_id}


def _now() -> datetime:
    return datetime.now(tz=UTC)


def _player_key(player_id: str) -> str:
    return f"{PLAYER_KEY_PREFIX}{player_id}"


def new_player(*, email: str, hero_name: str, player_id: str | None = None) -> PlayerRecord:
    now = _now()
    return PlayerRecord(
        player_id=player_id or uuid4().hex,
        email=email,
        hero_name=hero_name,
        stats=Stats(),
        level=1,
        xp=0,
        gold=100,
        created_at=now,
        last_updated_at=now,
    )


def save_player(*, r: redis.Redis, player: PlayerRecord) -> None:
    player.version += 1
    player.last_updated_at = _now()
    try:
        r.set(_player_key(player.player_id), player.model_dump_json(by_alias=True))
        r.sadd(PLAYERS_SET_KEY, player.player_id)
    except redis.RedisError as e:
        logger.warning("failed to save player %s: %s", player.player_id, e)
        raise StorageError("Could not save player") from e


def get_player(*, r: redis.Redis, player_id: str) -> PlayerRecord | None:
    try:
        raw = r.get(_player_key(player_id))
    except redis.RedisError as e:
        logger.warning("failed to load player %s: %s", player_id, e)
        raise StorageError("Could not load player") from e
    if not raw:
        return None
    return PlayerRecord.model_validate_json(raw)


def require_player(*, r: redis.Redis, player_id: str) -> PlayerRecord:
    player = get_player(r=r, player_id=player_id)
    if player is None:
        raise NotFound("User not found")
    return player
