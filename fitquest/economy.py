from __future__ import annotations

from dataclasses import dataclass

from fitquest.api.models import PlayerRecord
from fitquest.errors import InsufficientFunds, PreconditionFailed, ValidationError


HEALTH_POTION_PRICE = 10  # gold per health point


@dataclass(frozen=True, slots=True)
class HealthPurchase:
    health_gained: int
    gold_spent: int
    new_health: int
    new_gold: int


def grant_gold(player: PlayerRecord, amount: int) -> int:
    if amount < 0:
        raise ValidationError("gold amount must be non-negative")
    player.gold += amount
    return player.gold


def buy_health(player: PlayerRecord, *, amount: int) -> HealthPurchase:
    """Trade gold for health at a fixed price per point.

    Purchases that would push health above the player's max health are rejected.
    """

    if amount <= 0:
        raise ValidationError("amount must be positive")

    room = player.stats.max_health - player.stats.health
    if room <= 0:
        raise PreconditionFailed("Your health is already full!")

    cost = amount * HEALTH_POTION_PRICE
    if player.gold < cost:
        raise InsufficientFunds(f"Not enough gold! Need {cost} gold.")
    if amount > room:
        raise PreconditionFailed(f"You can only restore {room} more health!")

    player.gold -= cost
    player.stats.health += amount
    return HealthPurchase(
        health_gained=amount,
        gold_spent=cost,
        new_health=player.stats.health,
        new_gold=player.gold,
    )
