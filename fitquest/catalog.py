from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Reward:
    xp: int
    gold: int


DEFAULT_ENEMY_REWARD = Reward(xp=50, gold=25)


@dataclass(frozen=True, slots=True)
class QuestDef:
    title: str
    description: str
    type: str
    requirement: int
    reward: Reward


@dataclass(frozen=True, slots=True)
class EnemyDef:
    name: str
    hp: int
    damage: int
    description: str
    reward: Reward | None = None


@dataclass(frozen=True, slots=True)
class Catalog:
    quests: tuple[QuestDef, ...]
    enemies: tuple[EnemyDef, ...]

    def enemy_by_name(self, name: str) -> EnemyDef | None:
        return next((e for e in self.enemies if e.name == name), None)


def build_default_catalog() -> Catalog:
    quests = (
        QuestDef(
            title="First Steps",
            description="Complete 10 squats to strengthen your legs",
            type="workout",
            requirement=10,
            reward=Reward(xp=50, gold=25),
        ),
        QuestDef(
            title="Hydration Hero",
            description="Drink 4 cups of water today",
            type="hydration",
            requirement=4,
            reward=Reward(xp=30, gold=15),
        ),
        QuestDef(
            title="Push-up Power",
            description="Complete 15 push-ups for upper body strength",
            type="workout",
            requirement=15,
            reward=Reward(xp=75, gold=35),
        ),
    )
    enemies = (
        EnemyDef(
            name="The Lazy Dragon",
            hp=50,
            damage=8,
            reward=Reward(xp=100, gold=50),
            description="A sleepy dragon that hates exercise!",
        ),
        EnemyDef(
            name="Procrastination Golem",
            hp=80,
            damage=12,
            reward=Reward(xp=150, gold=75),
            description="A creature made of excuses and delays",
        ),
        EnemyDef(
            name="Motivation Slayer",
            hp=120,
            damage=15,
            reward=Reward(xp=200, gold=100),
            description="Drains your will to workout",
        ),
        EnemyDef(
            name="Couch Potato Titan",
            hp=150,
            damage=18,
            reward=Reward(xp=250, gold=125),
            description="A titan made of laziness and snacks",
        ),
    )
    return Catalog(quests=quests, enemies=enemies)


_CATALOG: Catalog | None = None


def init_catalog(catalog: Catalog | None = None) -> Catalog:
    """Install the process-wide catalog once.

    Safe to call multiple times; subsequent calls return the already installed instance.
    """

    global _CATALOG
    if _CATALOG is None:
        _CATALOG = catalog or build_default_catalog()
    return _CATALOG


def reset_catalog_for_tests() -> None:
    global _CATALOG
    _CATALOG = None


def get_catalog() -> Catalog:
    if _CATALOG is None:
        raise RuntimeError("Catalog not initialized. Call init_catalog() at startup.")
    return _CATALOG
