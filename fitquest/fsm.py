from __future__ import annotations

from statemachine import State, StateMachine

from fitquest.api.models import BattleInstance, BattleStatus


class BattleFSM(StateMachine):
    """FSM wrapper around a BattleInstance.

    - states: active -> victorious | defeated | fled (all final)
    - the battle engine mutates HP and rewards; the FSM only guards transitions.
    """

    active = State("Active", value=BattleStatus.active.value, initial=True)
    victorious = State("Victorious", value=BattleStatus.victorious.value, final=True)
    defeated = State("Defeated", value=BattleStatus.defeated.value, final=True)
    fled = State("Fled", value=BattleStatus.fled.value, final=True)

    win = active.to(victorious)
    lose = active.to(defeated)
    escape = active.to(fled)

    def __init__(self, battle: BattleInstance):
        self.battle = battle
        super().__init__(start_value=battle.status.value)

    @property
    def is_terminal(self) -> bool:
        return self.current_state_value != BattleStatus.active.value

    def sync_status_to_model(self) -> None:
        self.battle.status = BattleStatus(str(self.current_state_value))
