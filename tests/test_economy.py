from __future__ import annotations

import pytest

from fitquest.api.models import PlayerRecord
from fitquest.economy import buy_health, grant_gold
from fitquest.errors import InsufficientFunds, PreconditionFailed, ValidationError


def test_buy_health_insufficient_gold(player: PlayerRecord) -> None:
    player.stats.health = 50
    player.gold = 40

    with pytest.raises(InsufficientFunds):
        buy_health(player, amount=5)

    assert player.gold == 40
    assert player.stats.health == 50


def test_buy_health_spends_exact_gold(player: PlayerRecord) -> None:
    player.stats.health = 50
    player.gold = 50

    purchase = buy_health(player, amount=5)

    assert purchase.gold_spent == 50
    assert purchase.health_gained == 5
    assert player.gold == 0
    assert player.stats.health == 55
    assert (purchase.new_health, purchase.new_gold) == (55, 0)


def test_buy_health_rejects_overfill_without_charging(player: PlayerRecord) -> None:
    player.stats.health = 97
    player.gold = 100

    with pytest.raises(PreconditionFailed) as e:
        buy_health(player, amount=10)
    assert not isinstance(e.value, InsufficientFunds)
    assert player.stats.health == 97
    assert player.gold == 100

    purchase = buy_health(player, amount=3)
    assert purchase.gold_spent == 30
    assert player.stats.health == player.stats.max_health == 100
    assert player.gold == 70


def test_buy_health_near_max_still_charges_full_price(player: PlayerRecord) -> None:
    player.stats.health = 97
    player.gold = 40

    with pytest.raises(InsufficientFunds) as e:
        buy_health(player, amount=5)
    assert str(e.value) == "Not enough gold! Need 50 gold."
    assert (player.stats.health, player.gold) == (97, 40)


def test_buy_health_when_full(player: PlayerRecord) -> None:
    with pytest.raises(PreconditionFailed):
        buy_health(player, amount=1)
    assert player.gold == 100


def test_insufficient_funds_is_a_precondition_failure() -> None:
    assert issubclass(InsufficientFunds, PreconditionFailed)


def test_buy_health_rejects_non_positive_amount(player: PlayerRecord) -> None:
    with pytest.raises(ValidationError):
        buy_health(player, amount=0)


def test_grant_gold(player: PlayerRecord) -> None:
    assert grant_gold(player, 25) == 125
    with pytest.raises(ValidationError):
        grant_gold(player, -1)


def test_validation_error_maps_to_unprocessable() -> None:
    assert ValidationError.status_code == 422
