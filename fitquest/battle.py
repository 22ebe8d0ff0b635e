from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import uuid4

from statemachine.exceptions import TransitionNotAllowed

from fitquest.api.models import BattleInstance, BattleStatus, PlayerRecord
from fitquest.catalog import DEFAULT_ENEMY_REWARD, EnemyDef, Reward, get_catalog
from fitquest.economy import grant_gold
from fitquest.errors import NoActiveBattle, PreconditionFailed
from fitquest.fsm import BattleFSM
from fitquest.progression import LevelUp, gain_xp
from fitquest.validators import ValidationContext, pipeline_for_action


logger = logging.getLogger(__name__)

DEFAULT_ENEMY_DAMAGE = 10
FLEE_HEALTH_COST = 5

# Level-ups earned from a victory grow every stat, unlike workout level-ups.
BATTLE_LEVEL_UP_GROWTH: dict[str, int] = {
    "strength": 2,
    "stamina": 2,
    "agility": 1,
    "health": 20,
    "max_health": 20,
}


@dataclass(frozen=True, slots=True)
class BattleStarted:
    battle: BattleInstance
    enemy: EnemyDef


@dataclass(frozen=True, slots=True)
class BattleResult:
    victory: bool
    reward: Reward | None
    level_up: LevelUp | None
    message: str


@dataclass(frozen=True, slots=True)
class AttackOutcome:
    damage_dealt: int
    damage_taken: int
    battle: BattleInstance
    result: BattleResult | None


@dataclass(frozen=True, slots=True)
class FleeOutcome:
    health_lost: int
    new_health: int
    battle: BattleInstance


def _validate(player: PlayerRecord, action: str) -> None:
    ctx = ValidationContext(player_id=player.player_id, action=action)
    pipeline_for_action(action).validate(ctx=ctx, player=player)


def active_battle(player: PlayerRecord) -> BattleInstance | None:
    if player.active_battle_id is None:
        return None
    # The active battle is normally the last one, so search from the end.
    return next((b for b in reversed(player.battles) if b.battle_id == player.active_battle_id), None)


def attack_damage(*, reps: int, weight: float | None, strength: int) -> int:
    return math.floor(reps * (weight or 1) / 10) + strength


def start_battle(
    player: PlayerRecord,
    *,
    rng: random.Random | None = None,
    now: datetime | None = None,
) -> BattleStarted:
    _validate(player, "start")

    enemies = get_catalog().enemies
    enemy = (rng or random.SystemRandom()).choice(enemies)

    battle = BattleInstance(
        battle_id=uuid4().hex,
        enemy_name=enemy.name,
        enemy_hp=enemy.hp,
        enemy_max_hp=enemy.hp,
        enemy_damage=enemy.damage,
        enemy_description=enemy.description,
        user_hp=player.stats.health,
        user_max_hp=player.stats.health,
        status=BattleStatus.active,
        created_at=now or datetime.now(tz=UTC),
    )
    player.battles.append(battle)
    player.active_battle_id = battle.battle_id

    logger.info("player %s started battle %s against %s", player.player_id, battle.battle_id, enemy.name)
    return BattleStarted(battle=battle, enemy=enemy)


def _apply_battle_growth(player: PlayerRecord) -> None:
    for stat, amount in BATTLE_LEVEL_UP_GROWTH.items():
        setattr(player.stats, stat, getattr(player.stats, stat) + amount)


def _resolve_victory(player: PlayerRecord, battle: BattleInstance) -> BattleResult:
    enemy = get_catalog().enemy_by_name(battle.enemy_name)
    reward = (enemy.reward if enemy is not None else None) or DEFAULT_ENEMY_REWARD

    level_up = gain_xp(player, reward.xp)
    grant_gold(player, reward.gold)
    if level_up.leveled_up:
        _apply_battle_growth(player)
        logger.info("player %s reached level %d from battle", player.player_id, level_up.new_level)

    return BattleResult(
        victory=True,
        reward=reward,
        level_up=level_up,
        message=f"You defeated {battle.enemy_name}! +{reward.xp} XP, +{reward.gold} Gold",
    )


def attack(player: PlayerRecord, *, name: str, reps: int, weight: float | None = None) -> AttackOutcome:
    """Resolve one exchange: the player's workout hits, then the enemy counters.

    The enemy's HP is checked first, so a blow that brings both sides to 0 is a victory.
    """

    _validate(player, "attack")
    battle = active_battle(player)
    if battle is None:
        raise NoActiveBattle("No active battle found")

    fsm = BattleFSM(battle)

    dealt = attack_damage(reps=reps, weight=weight, strength=player.stats.strength)
    battle.enemy_hp = max(battle.enemy_hp - dealt, 0)

    taken = battle.enemy_damage or DEFAULT_ENEMY_DAMAGE
    player.stats.health = max(player.stats.health - taken, 0)
    battle.user_hp = player.stats.health

    result: BattleResult | None = None
    if battle.enemy_hp <= 0:
        fsm.win()
        result = _resolve_victory(player, battle)
    elif battle.user_hp <= 0:
        fsm.lose()
        result = BattleResult(
            victory=False,
            reward=None,
            level_up=None,
            message="You were defeated! Your health has been reduced. Buy health potions to recover.",
        )

    fsm.sync_status_to_model()
    if fsm.is_terminal:
        player.active_battle_id = None
        logger.info("player %s battle %s ended: %s (%s)", player.player_id, battle.battle_id, battle.status.value, name)

    return AttackOutcome(damage_dealt=dealt, damage_taken=taken, battle=battle, result=result)


def flee(player: PlayerRecord) -> FleeOutcome:
    _validate(player, "flee")
    battle = player.battles[-1]

    fsm = BattleFSM(battle)
    try:
        fsm.escape()
    except TransitionNotAllowed as e:
        raise PreconditionFailed("No active battle") from e
    fsm.sync_status_to_model()

    if player.active_battle_id == battle.battle_id:
        player.active_battle_id = None

    before = player.stats.health
    player.stats.health = max(before - FLEE_HEALTH_COST, 0)

    logger.info("player %s fled battle %s", player.player_id, battle.battle_id)
    return FleeOutcome(health_lost=FLEE_HEALTH_COST, new_health=player.stats.health, battle=battle)
