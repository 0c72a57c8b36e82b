"""Unlock-challenge rules.

Per animal kind: available -> challenging -> owned (terminal), or
challenging -> cooldown -> available again once the cooldown has elapsed.
Refusals are ordinary outcomes and come back as ``False``; only unknown
animal keys raise, and those are rejected before reaching this module.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta
from enum import Enum
from fractions import Fraction
from typing import Callable

from game.clock import Clock, resolve_now, utc_now

from .catalog import AnimalCatalog
from .models import AnimalKind, PetRecord
from .registry import PetRegistry

logger = logging.getLogger(__name__)

DEFAULT_CHALLENGE_DAYS = 14
DEFAULT_COOLDOWN_DAYS = 14
DEFAULT_BANK_PERCENTAGE = 0.10


class ChallengeOutcome(str, Enum):
    NONE = "none"  # no active challenge
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


def banked_share(progress: int, percentage: float) -> int:
    """Truncated share of ``progress`` kept after a failed attempt."""
    if progress <= 0:
        return 0
    # Fraction(str(...)) keeps 0.1 exact, so 10% of 70 is 7 and not 7.000000000000001.
    return math.floor(Fraction(progress) * Fraction(str(percentage)))


class PetCoordinator:
    """Starts, progresses, completes and fails unlock challenges."""

    def __init__(
        self,
        registry: PetRegistry,
        catalog: AnimalCatalog,
        *,
        challenge_days: int = DEFAULT_CHALLENGE_DAYS,
        cooldown_days: int = DEFAULT_COOLDOWN_DAYS,
        bank_percentage: float = DEFAULT_BANK_PERCENTAGE,
        clock: Clock = utc_now,
        on_ownership_changed: Callable[[], None] | None = None,
    ):
        self._registry = registry
        self._catalog = catalog
        self._challenge_days = challenge_days
        self._cooldown_days = cooldown_days
        self._bank_percentage = bank_percentage
        self._clock = clock
        self._on_ownership_changed = on_ownership_changed

    # --- Onboarding ---

    def select_main_pet(self, kind: AnimalKind, name: str, now: datetime | None = None) -> bool:
        if self._registry.main_pet.value is not None:
            logger.debug("Main pet already chosen; ignoring %s", kind.value)
            return False
        definition = self._catalog.get(kind)
        if definition is None or not definition.is_starter:
            logger.debug("%s is not a starter animal", kind.value)
            return False

        now_dt = resolve_now(now, self._clock)
        pet = PetRecord(
            animal_kind=kind,
            display_name=name.strip() or definition.display_name,
            daily_requirement=definition.daily_requirement,
            is_main_pet=True,
            is_owned=True,
            unlocked_at=now_dt,
        )
        self._registry.commit(pet)
        logger.info("Main pet selected: %s the %s", pet.display_name, kind.value)
        self._sync_quota()
        return True

    def initialize_available_pets(self) -> int:
        """Seed a placeholder record for each challenge animal not yet known."""
        placeholders = [
            PetRecord(
                animal_kind=d.kind,
                display_name=d.display_name,
                daily_requirement=d.daily_requirement,
                unlock_goal=d.unlock_goal,
            )
            for d in self._catalog.challenge_animals()
            if self._registry.find_by_kind(d.kind) is None
        ]
        if placeholders:
            self._registry.commit(*placeholders)
        return len(placeholders)

    # --- Challenge lifecycle ---

    def start_challenge(self, kind: AnimalKind, now: datetime | None = None, name: str | None = None) -> bool:
        if self._registry.active_challenge.value is not None:
            logger.debug("Cannot start %s: a challenge is already active", kind.value)
            return False
        definition = self._catalog.get(kind)
        if definition is None or definition.is_starter:
            logger.debug("Cannot start %s: not a challenge animal", kind.value)
            return False

        now_dt = resolve_now(now, self._clock)
        existing = self._registry.find_by_kind(kind)
        if existing is not None:
            if existing.is_owned:
                logger.debug("Cannot start %s: already owned", kind.value)
                return False
            if existing.is_on_cooldown(now_dt):
                logger.debug("Cannot start %s: cooling down until %s", kind.value, existing.cooldown_until)
                return False

        days = definition.unlock_days or self._challenge_days
        base = existing or PetRecord(animal_kind=kind, display_name=definition.display_name)
        challenge = base.evolve(
            display_name=(name or "").strip() or base.display_name,
            daily_requirement=definition.daily_requirement,
            is_owned=False,
            unlock_goal=definition.unlock_goal,
            unlock_progress=base.banked_progress,
            unlock_deadline=now_dt + timedelta(days=days),
            cooldown_until=None,
        )
        self._registry.commit(challenge, active_id=challenge.id)
        logger.info(
            "Challenge started: %s (%d/%d, deadline %s)",
            kind.value,
            challenge.unlock_progress,
            challenge.unlock_goal,
            challenge.unlock_deadline.isoformat(),
        )
        return True

    def add_challenge_progress(self, amount: int) -> bool:
        challenge = self._registry.active_challenge.value
        if challenge is None or amount <= 0:
            return False
        self._registry.commit(challenge.evolve(unlock_progress=challenge.unlock_progress + amount))
        return True

    def apply_overflow(self, amount: int, now: datetime | None = None) -> ChallengeOutcome:
        """Feed overflow steps to the active challenge, then settle it."""
        if not self.add_challenge_progress(amount):
            return ChallengeOutcome.NONE
        return self.check_challenge_completion(now)

    def check_challenge_completion(self, now: datetime | None = None) -> ChallengeOutcome:
        challenge = self._registry.active_challenge.value
        if challenge is None:
            return ChallengeOutcome.NONE

        now_dt = resolve_now(now, self._clock)
        # Deadline first: a goal met but only checked after the deadline still fails.
        if challenge.unlock_deadline is not None and now_dt > challenge.unlock_deadline:
            logger.info("Challenge for %s expired at %s", challenge.animal_kind.value, challenge.unlock_deadline)
            self.abandon_challenge(now_dt)
            return ChallengeOutcome.FAILED
        if challenge.unlock_progress >= challenge.unlock_goal:
            self.complete_challenge(now_dt)
            return ChallengeOutcome.COMPLETED
        return ChallengeOutcome.IN_PROGRESS

    def complete_challenge(self, now: datetime | None = None) -> bool:
        challenge = self._registry.active_challenge.value
        if challenge is None:
            return False

        now_dt = resolve_now(now, self._clock)
        owned = challenge.evolve(
            is_owned=True,
            unlock_progress=0,
            banked_progress=0,
            unlock_deadline=None,
            cooldown_until=None,
            unlocked_at=now_dt,
        )
        self._registry.commit(owned, active_id=None)
        logger.info("Challenge completed: %s is now owned", owned.animal_kind.value)
        self._sync_quota()
        return True

    def abandon_challenge(self, now: datetime | None = None) -> bool:
        challenge = self._registry.active_challenge.value
        if challenge is None:
            return False

        now_dt = resolve_now(now, self._clock)
        banked = banked_share(challenge.unlock_progress, self._bank_percentage)
        failed = challenge.evolve(
            is_owned=False,
            unlock_progress=0,
            banked_progress=challenge.banked_progress + banked,
            unlock_deadline=None,
            cooldown_until=now_dt + timedelta(days=self._cooldown_days),
        )
        self._registry.commit(failed, active_id=None)
        logger.info(
            "Challenge for %s ended: banked %d (total %d), cooldown until %s",
            failed.animal_kind.value,
            banked,
            failed.banked_progress,
            failed.cooldown_until.isoformat(),
        )
        self._sync_quota()
        return True

    # --- Navigation between owned pets ---

    def select_pet(self, index: int) -> bool:
        return self._registry.set_current_pet_index(index)

    def next_pet(self) -> bool:
        count = len(self._registry.owned_pets.value)
        if count == 0:
            return False
        return self.select_pet((self._registry.current_pet_index.value + 1) % count)

    def previous_pet(self) -> bool:
        count = len(self._registry.owned_pets.value)
        if count == 0:
            return False
        return self.select_pet((self._registry.current_pet_index.value - 1 + count) % count)

    def _sync_quota(self) -> None:
        if self._on_ownership_changed is not None:
            self._on_ownership_changed()
