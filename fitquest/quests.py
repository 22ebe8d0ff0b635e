from __future__ import annotations

import logging
from dataclasses import dataclass

from fitquest.api.models import PlayerRecord, QuestInstance, QuestProgress, QuestType, RewardModel
from fitquest.catalog import get_catalog
from fitquest.economy import grant_gold
from fitquest.errors import NotFound, PreconditionFailed
from fitquest.progression import LevelUp, apply_xp, water_entry_for


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class QuestClaimed:
    quest: QuestInstance
    level_up: LevelUp


def seed_if_empty(player: PlayerRecord) -> bool:
    """Give the player a fresh copy of every catalog quest if they have none.

    Returns True when quests were seeded (the caller must persist the record).
    """

    if player.active_quests:
        return False

    player.active_quests = [
        QuestInstance(
            title=q.title,
            description=q.description,
            type=QuestType(q.type),
            requirement=q.requirement,
            reward=RewardModel(xp=q.reward.xp, gold=q.reward.gold),
            completed=False,
        )
        for q in get_catalog().quests
    ]
    return True


def counted_amount(player: PlayerRecord, quest: QuestInstance, *, today: str) -> int:
    if quest.type == QuestType.workout:
        # Lifetime squat reps, not just since the quest was assigned.
        return sum(w.reps for w in player.workouts if "squat" in w.name.casefold())
    if quest.type == QuestType.hydration:
        entry = water_entry_for(player, today)
        return entry.cups if entry else 0
    return 0


def progress_for(player: PlayerRecord, quest: QuestInstance, *, today: str) -> QuestProgress:
    done = counted_amount(player, quest, today=today)
    return QuestProgress(
        title=quest.title,
        description=quest.description,
        type=quest.type,
        requirement=quest.requirement,
        reward=quest.reward,
        completed=done,
        claimed=quest.completed,
        progress=min(done / quest.requirement, 1.0),
    )


def compute_progress(player: PlayerRecord, *, today: str) -> list[QuestProgress]:
    return [progress_for(player, q, today=today) for q in player.active_quests]


def complete_quest(player: PlayerRecord, *, index: int, today: str) -> QuestClaimed:
    if index < 0 or index >= len(player.active_quests):
        raise NotFound("Quest not found")

    quest = player.active_quests[index]
    if quest.completed:
        raise PreconditionFailed("Quest already completed")
    if progress_for(player, quest, today=today).progress < 1:
        raise PreconditionFailed("Quest requirement not met yet")

    quest.completed = True
    player.completed_quests.append(quest.model_copy(deep=True))
    level_up = apply_xp(player, quest.reward.xp, activity="quest")
    grant_gold(player, quest.reward.gold)
    logger.info("player %s completed quest %r", player.player_id, quest.title)
    return QuestClaimed(quest=quest, level_up=level_up)


def reset_quests(player: PlayerRecord) -> None:
    player.active_quests = []
