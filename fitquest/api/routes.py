from __future__ import annotations

from datetime import UTC, datetime

import redis
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from fitquest import auth
from fitquest.actions import run_player_action
from fitquest.activities import recent_activities
from fitquest.api.deps import current_player_id, get_redis
from fitquest.api.models import (
    AttackRequest,
    BuyHealthRequest,
    LoginRequest,
    LoginResponse,
    LogWaterRequest,
    LogWorkoutRequest,
    PlayerRecord,
    QuestInstance,
    QuestProgress,
    RegisterRequest,
)
from fitquest.battle import BattleResult, attack, flee, start_battle
from fitquest.economy import buy_health
from fitquest.errors import FitQuestError
from fitquest.player_store import require_player
from fitquest.progression import LevelUp, level_progress, log_water, log_workout, today_water
from fitquest.quests import complete_quest, compute_progress, reset_quests, seed_if_empty

router = APIRouter()


def _today() -> str:
    return datetime.now(tz=UTC).date().isoformat()


def _dump(model: BaseModel) -> dict[str, object]:
    return model.model_dump(mode="json", by_alias=True)


def _http_error(e: FitQuestError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=str(e))


def _level_fields(level_up: LevelUp) -> dict[str, object]:
    return {"leveledUp": level_up.leveled_up, "newLevel": level_up.new_level if level_up.leveled_up else None}


def _battle_result_fields(result: BattleResult | None) -> dict[str, object] | None:
    if result is None:
        return None
    out: dict[str, object] = {"victory": result.victory, "message": result.message}
    if result.reward is not None:
        out["reward"] = {"xp": result.reward.xp, "gold": result.reward.gold}
    if result.level_up is not None:
        out.update(_level_fields(result.level_up))
    return out


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy", "timestamp": datetime.now(tz=UTC).isoformat(), "service": "FitQuest API"}


@router.post("/register")
async def register_route(payload: RegisterRequest, r: redis.Redis = Depends(get_redis)) -> dict[str, object]:
    try:
        auth.register(r=r, email=payload.email, password=payload.password, hero_name=payload.hero_name)
    except FitQuestError as e:
        raise _http_error(e) from e
    return {"success": True, "message": "User registered"}


@router.post("/login", response_model=LoginResponse)
async def login_route(payload: LoginRequest, r: redis.Redis = Depends(get_redis)) -> LoginResponse:
    try:
        token, player = auth.login(r=r, email=payload.email, password=payload.password)
    except FitQuestError as e:
        raise _http_error(e) from e
    return LoginResponse(
        message="Login successful",
        token=token,
        hero_name=player.hero_name,
        stats=player.stats,
        level=player.level,
        gold=player.gold,
    )


@router.get("/profile", response_model=PlayerRecord)
async def profile_route(
    player_id: str = Depends(current_player_id),
    r: redis.Redis = Depends(get_redis),
) -> PlayerRecord:
    try:
        return require_player(r=r, player_id=player_id)
    except FitQuestError as e:
        raise _http_error(e) from e


@router.post("/log-water")
async def log_water_route(
    payload: LogWaterRequest,
    player_id: str = Depends(current_player_id),
    r: redis.Redis = Depends(get_redis),
) -> dict[str, object]:
    today = _today()
    try:
        result = run_player_action(
            r=r,
            player_id=player_id,
            action=lambda p: log_water(p, cups=payload.cups, today=today),
        )
    except FitQuestError as e:
        raise _http_error(e) from e
    return {
        "success": True,
        "message": "Water logged successfully",
        **today_water(result.player, today=today),
        **_level_fields(result.value),
    }


@router.get("/today-water")
async def today_water_route(
    player_id: str = Depends(current_player_id),
    r: redis.Redis = Depends(get_redis),
) -> dict[str, int]:
    try:
        player = require_player(r=r, player_id=player_id)
    except FitQuestError as e:
        raise _http_error(e) from e
    return today_water(player, today=_today())


@router.post("/log-workout")
async def log_workout_route(
    payload: LogWorkoutRequest,
    player_id: str = Depends(current_player_id),
    r: redis.Redis = Depends(get_redis),
) -> dict[str, object]:
    try:
        result = run_player_action(
            r=r,
            player_id=player_id,
            action=lambda p: log_workout(p, name=payload.name, reps=payload.reps, weight=payload.weight, sets=payload.sets),
        )
    except FitQuestError as e:
        raise _http_error(e) from e
    logged = result.value
    return {
        "success": True,
        "message": "Workout logged successfully",
        "xpEarned": logged.xp_earned,
        **_level_fields(logged.level_up),
    }


@router.get("/quests", response_model=list[QuestInstance])
async def quests_route(
    player_id: str = Depends(current_player_id),
    r: redis.Redis = Depends(get_redis),
) -> list[QuestInstance]:
    try:
        player = require_player(r=r, player_id=player_id)
        if not player.active_quests:
            player = run_player_action(r=r, player_id=player_id, action=seed_if_empty).player
    except FitQuestError as e:
        raise _http_error(e) from e
    return player.active_quests


@router.get("/quests/progress", response_model=list[QuestProgress])
async def quest_progress_route(
    player_id: str = Depends(current_player_id),
    r: redis.Redis = Depends(get_redis),
) -> list[QuestProgress]:
    try:
        player = require_player(r=r, player_id=player_id)
    except FitQuestError as e:
        raise _http_error(e) from e
    return compute_progress(player, today=_today())


@router.post("/quests/{index}/complete")
async def complete_quest_route(
    index: int,
    player_id: str = Depends(current_player_id),
    r: redis.Redis = Depends(get_redis),
) -> dict[str, object]:
    today = _today()
    try:
        result = run_player_action(r=r, player_id=player_id, action=lambda p: complete_quest(p, index=index, today=today))
    except FitQuestError as e:
        raise _http_error(e) from e
    claimed = result.value
    return {
        "success": True,
        "message": f"Quest complete: {claimed.quest.title}! +{claimed.quest.reward.xp} XP, +{claimed.quest.reward.gold} Gold",
        "quest": _dump(claimed.quest),
        "xp": result.player.xp,
        "gold": result.player.gold,
        **_level_fields(claimed.level_up),
    }


@router.post("/quests/reset")
async def reset_quests_route(
    player_id: str = Depends(current_player_id),
    r: redis.Redis = Depends(get_redis),
) -> dict[str, object]:
    try:
        run_player_action(r=r, player_id=player_id, action=reset_quests)
    except FitQuestError as e:
        raise _http_error(e) from e
    return {"success": True, "message": "Quests reset"}


@router.post("/battle/start")
async def battle_start_route(
    player_id: str = Depends(current_player_id),
    r: redis.Redis = Depends(get_redis),
) -> dict[str, object]:
    try:
        result = run_player_action(r=r, player_id=player_id, action=start_battle)
    except FitQuestError as e:
        raise _http_error(e) from e
    started = result.value
    return {
        "success": True,
        "battle": _dump(started.battle),
        "userStats": _dump(result.player.stats),
        "message": f"A wild {started.enemy.name} appears! {started.enemy.description}",
    }


@router.post("/battle/attack")
async def battle_attack_route(
    payload: AttackRequest,
    player_id: str = Depends(current_player_id),
    r: redis.Redis = Depends(get_redis),
) -> dict[str, object]:
    try:
        result = run_player_action(
            r=r,
            player_id=player_id,
            action=lambda p: attack(p, name=payload.name, reps=payload.reps, weight=payload.weight),
        )
    except FitQuestError as e:
        raise _http_error(e) from e

    outcome = result.value
    battle = outcome.battle
    if outcome.result is not None:
        message = outcome.result.message
    else:
        message = f"You dealt {outcome.damage_dealt} damage! {battle.enemy_name} hit you for {outcome.damage_taken} damage!"
    return {
        "success": True,
        "damageDealt": outcome.damage_dealt,
        "damageTaken": outcome.damage_taken,
        "battle": _dump(battle),
        "userHealth": result.player.stats.health,
        "battleResult": _battle_result_fields(outcome.result),
        "message": message,
    }


@router.post("/battle/flee")
async def battle_flee_route(
    player_id: str = Depends(current_player_id),
    r: redis.Redis = Depends(get_redis),
) -> dict[str, object]:
    try:
        result = run_player_action(r=r, player_id=player_id, action=flee)
    except FitQuestError as e:
        raise _http_error(e) from e
    outcome = result.value
    return {
        "success": True,
        "healthLost": outcome.health_lost,
        "newHealth": outcome.new_health,
        "message": f"You fled from battle! Lost {outcome.health_lost} health from the escape.",
    }


@router.post("/shop/buy-health")
async def buy_health_route(
    payload: BuyHealthRequest,
    player_id: str = Depends(current_player_id),
    r: redis.Redis = Depends(get_redis),
) -> dict[str, object]:
    try:
        result = run_player_action(r=r, player_id=player_id, action=lambda p: buy_health(p, amount=payload.amount))
    except FitQuestError as e:
        raise _http_error(e) from e
    purchase = result.value
    return {
        "success": True,
        "healthGained": purchase.health_gained,
        "goldSpent": purchase.gold_spent,
        "newHealth": purchase.new_health,
        "newGold": purchase.new_gold,
        "message": f"Restored {purchase.health_gained} health for {purchase.gold_spent} gold!",
    }


@router.get("/recent-activities")
async def recent_activities_route(
    player_id: str = Depends(current_player_id),
    r: redis.Redis = Depends(get_redis),
) -> dict[str, object]:
    try:
        player = require_player(r=r, player_id=player_id)
    except FitQuestError as e:
        raise _http_error(e) from e
    return {"activities": recent_activities(player)}


@router.get("/level-progress")
async def level_progress_route(
    player_id: str = Depends(current_player_id),
    r: redis.Redis = Depends(get_redis),
) -> dict[str, object]:
    try:
        player = require_player(r=r, player_id=player_id)
    except FitQuestError as e:
        raise _http_error(e) from e
    return level_progress(player)
