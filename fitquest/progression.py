from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import UTC, datetime

from fitquest.api.models import PlayerRecord, WaterEntry, WorkoutEntry
from fitquest.errors import ValidationError


logger = logging.getLogger(__name__)

XP_PER_LEVEL = 100
DAILY_WATER_GOAL = 8
WATER_XP_PER_CUP = 2

# Substring -> bonus xp. Every matching entry applies.
WORKOUT_XP_BONUSES: tuple[tuple[str, int], ...] = (
    ("squat", 5),
    ("push", 8),
    ("plank", 3),
)

STAT_GROWTH_STEP = 2


@dataclass(frozen=True, slots=True)
class LevelUp:
    leveled_up: bool
    new_level: int


@dataclass(frozen=True, slots=True)
class WorkoutLogged:
    xp_earned: int
    level_up: LevelUp


def level_for_xp(xp: int) -> int:
    return xp // XP_PER_LEVEL + 1


def award_workout_xp(name: str, reps: int, weight: float, sets: int = 1) -> int:
    """Xp earned for one logged exercise.

    Base is one point per ten units of volume (reps * weight * sets) plus a flat 10,
    with bonuses for exercise names containing squat/push/plank.
    """

    lowered = name.casefold()
    bonus = sum(points for needle, points in WORKOUT_XP_BONUSES if needle in lowered)
    return math.floor(reps * weight * sets / 10) + 10 + bonus


def growth_stat_for(activity: str) -> str:
    lowered = activity.casefold()
    if "squat" in lowered or "push" in lowered:
        return "strength"
    if "plank" in lowered or "crunch" in lowered:
        return "stamina"
    return "agility"


def gain_xp(player: PlayerRecord, amount: int) -> LevelUp:
    """Add xp and raise `player.level` to match. Returns whether a threshold was crossed.

    Callers apply their own growth on a crossing, once per call no matter how
    many levels were gained.
    """

    if amount < 0:
        raise ValidationError("xp amount must be non-negative")

    player.xp += amount
    new_level = level_for_xp(player.xp)
    if new_level <= player.level:
        return LevelUp(leveled_up=False, new_level=player.level)
    player.level = new_level
    return LevelUp(leveled_up=True, new_level=new_level)


def apply_xp(player: PlayerRecord, amount: int, *, activity: str) -> LevelUp:
    result = gain_xp(player, amount)
    if result.leveled_up:
        stat = growth_stat_for(activity)
        setattr(player.stats, stat, getattr(player.stats, stat) + STAT_GROWTH_STEP)
        logger.info("player %s reached level %d (+%d %s)", player.player_id, result.new_level, STAT_GROWTH_STEP, stat)
    return result


def log_workout(
    player: PlayerRecord,
    *,
    name: str,
    reps: int,
    weight: float,
    sets: int = 1,
    now: datetime | None = None,
) -> WorkoutLogged:
    xp = award_workout_xp(name, reps, weight, sets)
    player.workouts.append(
        WorkoutEntry(
            name=name,
            reps=reps * sets,
            weight=weight,
            xp=xp,
            timestamp=now or datetime.now(tz=UTC),
        )
    )
    level_up = apply_xp(player, xp, activity=name)
    return WorkoutLogged(xp_earned=xp, level_up=level_up)


def water_entry_for(player: PlayerRecord, day: str) -> WaterEntry | None:
    return next((e for e in player.water_intake if e.date == day), None)


def log_water(player: PlayerRecord, *, cups: int, today: str) -> LevelUp:
    if cups < 0:
        raise ValidationError("cups must be non-negative")

    entry = water_entry_for(player, today)
    if entry is None:
        player.water_intake.append(WaterEntry(date=today, cups=cups))
        player.water_intake.sort(key=lambda e: e.date)
    else:
        entry.cups += cups

    return apply_xp(player, round(cups * WATER_XP_PER_CUP), activity="water")


def today_water(player: PlayerRecord, *, today: str) -> dict[str, int]:
    entry = water_entry_for(player, today)
    return {"cups": entry.cups if entry else 0, "goal": DAILY_WATER_GOAL}


def level_progress(player: PlayerRecord) -> dict[str, object]:
    xp_for_current = (player.level - 1) * XP_PER_LEVEL
    xp_progress = player.xp - xp_for_current
    return {
        "level": player.level,
        "xp": player.xp,
        "xpForNextLevel": player.level * XP_PER_LEVEL,
        "xpProgress": xp_progress,
        "progressPercent": min(xp_progress / XP_PER_LEVEL * 100, 100),
        "nextLevel": player.level + 1,
    }
