"""Precondition checks for battle actions.

Each action gets a small pipeline of validators so the rules are explicit and
show up in one place instead of being spread across the battle handlers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from fitquest.api.models import BattleStatus, PlayerRecord
from fitquest.errors import NoActiveBattle, PreconditionFailed


@dataclass(frozen=True, slots=True)
class ValidationContext:
    """Inputs available to validators.

    Keep this tight and serializable-ish so we can safely log it.
    """

    player_id: str
    action: str


class ActionValidator(ABC):
    """A small, composable validation unit for an incoming action."""

    @abstractmethod
    def validate(self, *, ctx: ValidationContext, player: PlayerRecord) -> None:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class MinimumHealthValidator(ActionValidator):
    """Health must be strictly above `floor`."""

    floor: int

    def validate(self, *, ctx: ValidationContext, player: PlayerRecord) -> None:
        if player.stats.health <= self.floor:
            raise PreconditionFailed("Your health is too low! Buy health potions first.")


@dataclass(frozen=True, slots=True)
class NoActiveBattleValidator(ActionValidator):
    def validate(self, *, ctx: ValidationContext, player: PlayerRecord) -> None:
        if player.active_battle_id is not None:
            raise PreconditionFailed("You are already in a battle! Finish or flee it first.")


@dataclass(frozen=True, slots=True)
class ActiveBattleValidator(ActionValidator):
    def validate(self, *, ctx: ValidationContext, player: PlayerRecord) -> None:
        if player.active_battle_id is None:
            raise NoActiveBattle("No active battle found")


@dataclass(frozen=True, slots=True)
class LatestBattleOpenValidator(ActionValidator):
    """The most recently created battle must exist and still be active."""

    def validate(self, *, ctx: ValidationContext, player: PlayerRecord) -> None:
        if not player.battles or player.battles[-1].status != BattleStatus.active:
            raise PreconditionFailed("No active battle")


@dataclass(frozen=True, slots=True)
class ValidatorPipeline:
    validators: tuple[ActionValidator, ...]

    def validate(self, *, ctx: ValidationContext, player: PlayerRecord) -> None:
        for v in self.validators:
            v.validate(ctx=ctx, player=player)


MIN_HEALTH_TO_BATTLE = 10

DEFAULT_BATTLE_PIPELINES: dict[str, ValidatorPipeline] = {
    "start": ValidatorPipeline(
        validators=(
            MinimumHealthValidator(floor=MIN_HEALTH_TO_BATTLE),
            NoActiveBattleValidator(),
        )
    ),
    "attack": ValidatorPipeline(validators=(ActiveBattleValidator(),)),
    "flee": ValidatorPipeline(validators=(LatestBattleOpenValidator(),)),
}


def pipeline_for_action(action: str) -> ValidatorPipeline:
    pipe = DEFAULT_BATTLE_PIPELINES.get(action)
    if pipe is None:
        raise ValueError(f"Unknown action: {action}")
    return pipe
