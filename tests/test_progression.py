from __future__ import annotations

from datetime import UTC, datetime

import pytest

from fitquest.api.models import PlayerRecord
from fitquest.errors import ValidationError
from fitquest.progression import (
    apply_xp,
    award_workout_xp,
    level_for_xp,
    level_progress,
    log_water,
    log_workout,
    today_water,
)


@pytest.mark.parametrize(
    ("xp", "level"),
    [(0, 1), (99, 1), (100, 2), (199, 2), (250, 3), (1000, 11)],
)
def test_level_for_xp(xp: int, level: int) -> None:
    assert level_for_xp(xp) == level


def test_level_is_monotonic_in_xp() -> None:
    levels = [level_for_xp(xp) for xp in range(0, 2000, 7)]
    assert levels == sorted(levels)


def test_workout_xp_squat_example() -> None:
    assert award_workout_xp("squat", 10, 5, 1) == 20


def test_workout_xp_bonus_is_case_insensitive() -> None:
    assert award_workout_xp("Barbell SQUATS", 10, 5) == 20
    assert award_workout_xp("Push-ups", 20, 1) == 2 + 10 + 8
    assert award_workout_xp("plank", 1, 0) == 10 + 3
    assert award_workout_xp("deadlift", 5, 100) == 50 + 10


def test_workout_xp_bonuses_stack_when_name_matches_several() -> None:
    # "push" + "squat" both match.
    assert award_workout_xp("squat push combo", 0, 0) == 10 + 5 + 8


def test_workout_xp_counts_sets_and_floors() -> None:
    assert award_workout_xp("row", 8, 12.5, sets=3) == 30 + 10
    assert award_workout_xp("row", 3, 3) == 0 + 10


def test_apply_xp_without_crossing_keeps_stats(player: PlayerRecord) -> None:
    result = apply_xp(player, 99, activity="squat")
    assert result.leveled_up is False
    assert player.level == 1
    assert player.stats.strength == 5


@pytest.mark.parametrize(
    ("activity", "stat"),
    [
        ("Squat", "strength"),
        ("push press", "strength"),
        ("plank hold", "stamina"),
        ("crunches", "stamina"),
        ("running", "agility"),
        ("water", "agility"),
    ],
)
def test_apply_xp_growth_by_activity(player: PlayerRecord, activity: str, stat: str) -> None:
    result = apply_xp(player, 100, activity=activity)
    assert result.leveled_up is True
    assert result.new_level == 2
    assert getattr(player.stats, stat) == 7


def test_multi_level_jump_grows_stats_only_once(player: PlayerRecord) -> None:
    result = apply_xp(player, 350, activity="squat")
    assert result.new_level == 4
    assert player.level == 4
    assert player.stats.strength == 7


def test_growth_never_reapplied_for_levels_already_reached(player: PlayerRecord) -> None:
    apply_xp(player, 150, activity="squat")
    apply_xp(player, 10, activity="squat")
    assert player.level == 2
    assert player.stats.strength == 7


def test_apply_xp_rejects_negative(player: PlayerRecord) -> None:
    with pytest.raises(ValidationError):
        apply_xp(player, -1, activity="squat")
    assert player.xp == 0


def test_log_workout_records_entry_and_levels(player: PlayerRecord) -> None:
    now = datetime(2025, 1, 1, 12, tzinfo=UTC)
    logged = log_workout(player, name="squat", reps=30, weight=30, sets=1, now=now)

    assert logged.xp_earned == 90 + 10 + 5
    assert logged.level_up.leveled_up is True
    assert player.xp == 105
    assert player.level == 2
    assert player.stats.strength == 7

    entry = player.workouts[-1]
    assert entry.name == "squat"
    assert entry.xp == 105
    assert entry.timestamp == now


def test_log_workout_stores_total_reps_across_sets(player: PlayerRecord) -> None:
    log_workout(player, name="lunge", reps=10, weight=0, sets=3)
    assert player.workouts[-1].reps == 30


def test_log_water_accumulates_per_day(player: PlayerRecord) -> None:
    log_water(player, cups=2, today="2025-01-01")
    log_water(player, cups=3, today="2025-01-01")
    log_water(player, cups=1, today="2025-01-02")

    assert [(e.date, e.cups) for e in player.water_intake] == [("2025-01-01", 5), ("2025-01-02", 1)]
    assert player.xp == 12
    assert today_water(player, today="2025-01-01") == {"cups": 5, "goal": 8}
    assert today_water(player, today="2025-01-03") == {"cups": 0, "goal": 8}


def test_log_water_xp_can_level_up(player: PlayerRecord) -> None:
    player.xp = 98
    result = log_water(player, cups=1, today="2025-01-01")
    assert result.leveled_up is True
    assert player.level == 2
    assert player.stats.agility == 7


def test_level_progress(player: PlayerRecord) -> None:
    apply_xp(player, 150, activity="run")
    assert level_progress(player) == {
        "level": 2,
        "xp": 150,
        "xpForNextLevel": 200,
        "xpProgress": 50,
        "progressPercent": 50.0,
        "nextLevel": 3,
    }
