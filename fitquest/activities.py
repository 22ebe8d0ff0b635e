from __future__ import annotations

from datetime import UTC, datetime

from fitquest.api.models import BattleStatus, PlayerRecord
from fitquest.progression import WATER_XP_PER_CUP


MAX_ACTIVITIES = 10

_BATTLE_DETAILS = {
    BattleStatus.victorious: "Victory!",
    BattleStatus.fled: "Fled",
    BattleStatus.defeated: "Defeated",
    BattleStatus.active: "In progress",
}


def _day_start(day: str) -> datetime:
    return datetime.fromisoformat(day).replace(tzinfo=UTC)


def _format_weight(weight: float) -> str:
    return f"{weight:g}"


def recent_activities(player: PlayerRecord) -> list[dict[str, object]]:
    """Newest-first feed mixing the latest workouts, battles and water logs."""

    workouts = sorted(player.workouts, key=lambda w: w.timestamp, reverse=True)[:5]
    battles = sorted(player.battles, key=lambda b: b.created_at, reverse=True)[:5]
    water = sorted(player.water_intake, key=lambda e: e.date, reverse=True)[:3]

    items: list[tuple[datetime, dict[str, object]]] = []

    for w in workouts:
        details = f"{w.reps} reps"
        if w.weight:
            details += f" @ {_format_weight(w.weight)}kg"
        items.append(
            (
                w.timestamp,
                {"type": "workout", "title": w.name, "details": details, "xp": w.xp, "date": w.timestamp.isoformat()},
            )
        )

    for b in battles:
        items.append(
            (
                b.created_at,
                {
                    "type": "battle",
                    "title": b.enemy_name or "Enemy",
                    "details": _BATTLE_DETAILS[b.status],
                    "xp": 50 if b.victory else 10,
                    "date": b.created_at.isoformat(),
                    "result": "victory" if b.victory else "defeat",
                },
            )
        )

    for e in water:
        items.append(
            (
                _day_start(e.date),
                {
                    "type": "water",
                    "title": "Water Intake",
                    "details": f"{e.cups} cups",
                    "xp": round(e.cups * WATER_XP_PER_CUP),
                    "date": e.date,
                },
            )
        )

    items.sort(key=lambda pair: pair[0], reverse=True)
    return [item for _, item in items[:MAX_ACTIVITIES]]
