"""Session root - owns one ledger, one registry and the coordinators.

Presentation code holds a ``GameSession`` and nothing else: it pushes step
deltas and "now" in through the commands below and subscribes to the
observables exposed on ``ledger`` and ``registry``.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from economy import EconomyCoordinator, EconomyLedger
from pets import AnimalKind, ChallengeOutcome, PetCoordinator, PetRegistry

from .clock import Clock, day_marker, resolve_now, utc_now
from .config import GameSettings, load_config

logger = logging.getLogger(__name__)


class GameSession:
    """One player's progression state, wired together."""

    def __init__(self, settings: GameSettings | None = None, clock: Clock = utc_now):
        self._settings = settings or GameSettings.from_config(load_config())
        self._clock = clock

        self.ledger = EconomyLedger(
            day_marker(clock()),
            wallet=self._settings.starting_wallet,
        )
        self.registry = PetRegistry()
        self.economy = EconomyCoordinator(self.ledger, self.registry, clock=clock)
        self.pets = PetCoordinator(
            self.registry,
            self._settings.catalog,
            challenge_days=self._settings.challenge_days,
            cooldown_days=self._settings.cooldown_days,
            bank_percentage=self._settings.bank_percentage,
            clock=clock,
            on_ownership_changed=self.economy.sync_daily_quota_from_pets,
        )
        self.economy.attach_pets(self.pets)
        self._started = False

    def start(self, now: datetime | None = None) -> None:
        """Session start: seed challenge animals, settle the day, sync quota."""
        if self._started:
            return
        now_dt = resolve_now(now, self._clock)
        seeded = self.pets.initialize_available_pets()
        self.economy.check_day_rollover(now_dt)
        self.economy.sync_daily_quota_from_pets()
        self._started = True
        logger.info("Session started (%d challenge animal(s) available)", seeded)

    def refresh(self, now: datetime | None = None) -> ChallengeOutcome:
        """Run when the app regains focus."""
        now_dt = resolve_now(now, self._clock)
        self.economy.check_day_rollover(now_dt)
        self.economy.sync_daily_quota_from_pets()
        return self.pets.check_challenge_completion(now_dt)

    # --- Commands ---

    def record_steps(self, amount: int, now: datetime | None = None) -> int:
        return self.economy.record_steps(amount, now)

    def try_spend_food(self, amount: int) -> bool:
        return self.economy.try_spend_food(amount)

    def check_day_rollover(self, now: datetime | None = None) -> bool:
        return self.economy.check_day_rollover(now)

    def select_main_pet(self, kind: str | AnimalKind, name: str, now: datetime | None = None) -> bool:
        return self.pets.select_main_pet(AnimalKind.parse(kind), name, now)

    def start_challenge(self, kind: str | AnimalKind, now: datetime | None = None, name: str | None = None) -> bool:
        return self.pets.start_challenge(AnimalKind.parse(kind), now, name)

    def abandon_challenge(self, now: datetime | None = None) -> bool:
        return self.pets.abandon_challenge(now)

    def check_challenge_completion(self, now: datetime | None = None) -> ChallengeOutcome:
        return self.pets.check_challenge_completion(now)

    # --- Read helpers ---

    def snapshot(self, now: datetime | None = None) -> dict[str, Any]:
        """Plain-dict summary of the observable state."""
        now_dt = resolve_now(now, self._clock)
        challenge = self.registry.active_challenge.value
        return {
            "date": self.ledger.today_date.value.isoformat(),
            "wallet": self.ledger.wallet.value,
            "today_steps": self.ledger.today_steps.value,
            "daily_quota": self.ledger.daily_quota.value,
            "quota_met": self.ledger.is_quota_met,
            "overflow": self.ledger.overflow,
            "lifetime_steps": self.ledger.lifetime_steps.value,
            "owned": [p.display_name for p in self.registry.owned_pets.value],
            "challenge": None
            if challenge is None
            else {
                "kind": challenge.animal_kind.value,
                "progress": challenge.unlock_progress,
                "goal": challenge.unlock_goal,
                "days_remaining": challenge.days_remaining(now_dt),
            },
            "cooling_down": [
                p.animal_kind.value for p in self.registry.available_pets.value if p.is_on_cooldown(now_dt)
            ],
        }
