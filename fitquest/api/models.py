from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # Wire format is camelCase (heroName, activeQuests, ...); Python code uses snake_case.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RewardModel(CamelModel):
    xp: int = Field(..., ge=0)
    gold: int = Field(..., ge=0)


class Stats(CamelModel):
    strength: int = 5
    stamina: int = 5
    agility: int = 5
    health: int = Field(default=100, ge=0)

    # Ceiling for potion purchases; grows with battle level-ups.
    max_health: int = Field(default=100, ge=1)


class WaterEntry(CamelModel):
    date: str  # ISO calendar day, YYYY-MM-DD
    cups: int = Field(default=0, ge=0)


class WorkoutEntry(CamelModel):
    name: str
    reps: int
    weight: float
    xp: int
    timestamp: datetime


class QuestType(StrEnum):
    workout = "workout"
    hydration = "hydration"
    boss = "boss"


class QuestInstance(CamelModel):
    title: str
    description: str
    type: QuestType
    requirement: int = Field(..., gt=0)
    reward: RewardModel
    completed: bool = False


class QuestProgress(QuestInstance):
    # `completed` on the progress view is the counted amount, not the terminal flag.
    completed: int = 0  # type: ignore[assignment]
    claimed: bool = False
    progress: float = 0.0


class BattleStatus(StrEnum):
    active = "active"
    victorious = "victorious"
    defeated = "defeated"
    fled = "fled"


class BattleInstance(CamelModel):
    battle_id: str
    enemy_name: str
    enemy_hp: int = Field(..., alias="enemyHP", ge=0)
    enemy_max_hp: int = Field(..., alias="enemyMaxHP", ge=0)
    enemy_damage: int | None = None
    enemy_description: str = ""
    user_hp: int = Field(..., alias="userHP", ge=0)
    user_max_hp: int = Field(..., alias="userMaxHP", ge=0)
    status: BattleStatus = BattleStatus.active
    created_at: datetime

    @computed_field  # type: ignore[prop-decorator]
    @property
    def completed(self) -> bool:
        return self.status != BattleStatus.active

    @computed_field  # type: ignore[prop-decorator]
    @property
    def victory(self) -> bool:
        return self.status == BattleStatus.victorious

    @computed_field  # type: ignore[prop-decorator]
    @property
    def fled(self) -> bool:
        return self.status == BattleStatus.fled


class PlayerRecord(CamelModel):
    player_id: str
    email: str
    hero_name: str
    stats: Stats = Field(default_factory=Stats)
    level: int = Field(default=1, ge=1)
    xp: int = Field(default=0, ge=0)
    gold: int = Field(default=100, ge=0)

    water_intake: list[WaterEntry] = Field(default_factory=list)
    workouts: list[WorkoutEntry] = Field(default_factory=list)
    active_quests: list[QuestInstance] = Field(default_factory=list)
    completed_quests: list[QuestInstance] = Field(default_factory=list)
    battles: list[BattleInstance] = Field(default_factory=list)

    # Explicit pointer to the single non-terminal battle, if any.
    active_battle_id: str | None = None

    # Bumped on every successful save.
    version: int = 0

    created_at: datetime
    last_updated_at: datetime


# ---- requests ----


class RegisterRequest(CamelModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=6, max_length=256)
    hero_name: str = Field(..., min_length=1, max_length=64)


class LoginRequest(CamelModel):
    email: str
    password: str


class LogWaterRequest(CamelModel):
    cups: int = Field(..., ge=0, le=64)


class LogWorkoutRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    reps: int = Field(..., ge=1, le=10_000)
    weight: float = Field(..., ge=0, le=10_000)
    sets: int = Field(default=1, ge=1, le=100)


class AttackRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    reps: int = Field(..., ge=0, le=10_000)
    weight: float | None = Field(default=None, ge=0, le=10_000)


class BuyHealthRequest(CamelModel):
    amount: int = Field(..., ge=1, le=1_000)


# ---- responses ----


class LoginResponse(CamelModel):
    success: bool = True
    message: str
    token: str
    hero_name: str
    stats: Stats
    level: int
    gold: int
