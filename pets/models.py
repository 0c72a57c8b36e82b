"""Pet data models."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum

from game.clock import as_aware, whole_days_between


class UnknownAnimalKindError(ValueError):
    """Raised when a key does not name any ``AnimalKind``."""

    def __init__(self, key: object):
        self.key = key
        super().__init__(f"Unknown animal kind: {key!r}")


class AnimalKind(str, Enum):
    # Starter pets (chosen at onboarding)
    PUPPY = "Puppy"
    KITTEN = "Kitten"
    BUNNY = "Bunny"

    # Unlock challenge pets
    DUCKLING = "Duckling"
    BABY_GIRAFFE = "BabyGiraffe"
    BABY_ELEPHANT = "BabyElephant"
    BABY_PENGUIN = "BabyPenguin"
    BABY_PANDA = "BabyPanda"

    @classmethod
    def parse(cls, key: str | AnimalKind) -> AnimalKind:
        """Accept the catalog key ("BabyPanda") or the member name ("baby_panda")."""
        if isinstance(key, cls):
            return key
        if isinstance(key, str):
            raw = key.strip()
            for member in cls:
                if raw == member.value or raw.replace("-", "_").upper() == member.name:
                    return member
            lowered = raw.lower()
            for member in cls:
                if lowered == member.value.lower():
                    return member
        raise UnknownAnimalKindError(key)


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class PetRecord:
    """One pet, owned or in progress. Replace it, never mutate it."""

    animal_kind: AnimalKind
    display_name: str
    daily_requirement: int = 0
    is_main_pet: bool = False
    is_owned: bool = False
    unlock_goal: int = 0
    unlock_progress: int = 0
    banked_progress: int = 0
    unlock_deadline: datetime | None = None
    cooldown_until: datetime | None = None
    unlocked_at: datetime | None = None
    id: str = field(default_factory=_new_id)

    @property
    def is_starter(self) -> bool:
        return self.unlock_goal == 0

    @property
    def is_in_challenge(self) -> bool:
        return not self.is_owned and self.unlock_deadline is not None

    @property
    def remaining_goal(self) -> int:
        return max(0, self.unlock_goal - self.unlock_progress)

    def is_on_cooldown(self, now: datetime) -> bool:
        return self.cooldown_until is not None and self.cooldown_until > as_aware(now)

    def can_start_challenge(self, now: datetime) -> bool:
        return (
            not self.is_owned
            and not self.is_starter
            and not self.is_in_challenge
            and not self.is_on_cooldown(now)
        )

    def days_remaining(self, now: datetime) -> int:
        if self.unlock_deadline is None:
            return 0
        return whole_days_between(now, self.unlock_deadline)

    def evolve(self, **changes) -> PetRecord:
        return replace(self, **changes)
