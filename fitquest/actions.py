from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

import redis

from fitquest.api.models import PlayerRecord
from fitquest.config import get_settings
from fitquest.lock import player_lock
from fitquest.player_store import require_player, save_player


logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class ActionResult(Generic[T]):
    player: PlayerRecord
    value: T


def run_player_action(
    *,
    r: redis.Redis,
    player_id: str,
    action: Callable[[PlayerRecord], T],
) -> ActionResult[T]:
    """Entry point for every state-changing request.

    Applies an action by:
    - acquiring a per-player lock
    - loading the player record
    - running the core operation against the in-memory record
    - persisting the record only if the operation returned normally

    An exception from `action` propagates before anything is written, so the
    stored record is left exactly as it was.
    """

    with player_lock(r=r, player_id=player_id, ttl_ms=get_settings().lock_ttl_ms):
        player = require_player(r=r, player_id=player_id)
        value = action(player)
        save_player(r=r, player=player)
        return ActionResult(player=player, value=value)
