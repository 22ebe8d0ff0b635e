from __future__ import annotations

from datetime import UTC, datetime

import pytest
from statemachine.exceptions import TransitionNotAllowed

from fitquest.api.models import BattleInstance, BattleStatus, PlayerRecord
from fitquest.errors import NoActiveBattle, PreconditionFailed
from fitquest.fsm import BattleFSM
from fitquest.validators import ValidationContext, pipeline_for_action


def _battle(status: BattleStatus = BattleStatus.active) -> BattleInstance:
    return BattleInstance(
        battle_id="b1",
        enemy_name="The Lazy Dragon",
        enemy_hp=50,
        enemy_max_hp=50,
        enemy_damage=8,
        user_hp=100,
        user_max_hp=100,
        status=status,
        created_at=datetime(2025, 1, 1, tzinfo=UTC),
    )


@pytest.mark.parametrize(
    ("event", "expected"),
    [("win", BattleStatus.victorious), ("lose", BattleStatus.defeated), ("escape", BattleStatus.fled)],
)
def test_fsm_active_transitions(event: str, expected: BattleStatus) -> None:
    battle = _battle()
    fsm = BattleFSM(battle)
    assert fsm.is_terminal is False

    getattr(fsm, event)()
    fsm.sync_status_to_model()

    assert battle.status == expected
    assert fsm.is_terminal is True


@pytest.mark.parametrize("status", [BattleStatus.victorious, BattleStatus.defeated, BattleStatus.fled])
def test_fsm_terminal_states_reject_transitions(status: BattleStatus) -> None:
    fsm = BattleFSM(_battle(status))
    for event in ("win", "lose", "escape"):
        with pytest.raises(TransitionNotAllowed):
            getattr(fsm, event)()


def test_battle_flags_follow_status() -> None:
    dumped = _battle(BattleStatus.fled).model_dump(mode="json", by_alias=True)
    assert dumped["completed"] is True
    assert dumped["fled"] is True
    assert dumped["victory"] is False
    assert dumped["enemyHP"] == 50
    assert dumped["userMaxHP"] == 100


def test_battle_json_round_trip_ignores_derived_flags() -> None:
    raw = _battle(BattleStatus.victorious).model_dump_json(by_alias=True)
    again = BattleInstance.model_validate_json(raw)
    assert again.status == BattleStatus.victorious
    assert again.victory is True


def test_start_pipeline_checks_health_then_active_battle(player: PlayerRecord) -> None:
    ctx = ValidationContext(player_id=player.player_id, action="start")

    player.stats.health = 10
    with pytest.raises(PreconditionFailed) as e:
        pipeline_for_action("start").validate(ctx=ctx, player=player)
    assert "health is too low" in str(e.value)

    player.stats.health = 50
    player.active_battle_id = "b1"
    with pytest.raises(PreconditionFailed) as e2:
        pipeline_for_action("start").validate(ctx=ctx, player=player)
    assert "already in a battle" in str(e2.value)


def test_attack_pipeline_requires_active_battle(player: PlayerRecord) -> None:
    ctx = ValidationContext(player_id=player.player_id, action="attack")
    with pytest.raises(NoActiveBattle):
        pipeline_for_action("attack").validate(ctx=ctx, player=player)


def test_flee_pipeline_looks_at_latest_battle(player: PlayerRecord) -> None:
    ctx = ValidationContext(player_id=player.player_id, action="flee")
    player.battles.append(_battle(BattleStatus.defeated))
    with pytest.raises(PreconditionFailed):
        pipeline_for_action("flee").validate(ctx=ctx, player=player)

    player.battles.append(_battle())
    pipeline_for_action("flee").validate(ctx=ctx, player=player)


def test_unknown_action_pipeline_raises() -> None:
    with pytest.raises(ValueError) as e:
        pipeline_for_action("nope")
    assert "Unknown action" in str(e.value)
