"""Economy rules: steps fill the quota, overflow feeds a challenge or the wallet."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from game.clock import Clock, day_marker, resolve_now, utc_now
from pets.registry import PetRegistry

from .ledger import EconomyLedger

if TYPE_CHECKING:
    from pets.coordinator import PetCoordinator

logger = logging.getLogger(__name__)


class EconomyCoordinator:
    """Ties step events, the daily rollover and the pet-driven quota together."""

    def __init__(
        self,
        ledger: EconomyLedger,
        registry: PetRegistry,
        pets: PetCoordinator | None = None,
        *,
        clock: Clock = utc_now,
    ):
        self._ledger = ledger
        self._registry = registry
        self._pets = pets
        self._clock = clock

    def attach_pets(self, pets: PetCoordinator) -> None:
        self._pets = pets

    def record_steps(self, amount: int, now: datetime | None = None) -> int:
        """Add steps; forward only the overflow this call created.

        Returns how much overflow went to the active challenge.
        """
        if amount <= 0:
            return 0
        quota = self._ledger.daily_quota.value
        previous_steps = self._ledger.today_steps.value
        self._ledger.add_steps(amount)
        current_steps = self._ledger.today_steps.value

        previous_overflow = max(0, previous_steps - quota)
        current_overflow = max(0, current_steps - quota)
        new_overflow = current_overflow - previous_overflow
        if new_overflow <= 0 or self._pets is None:
            return 0
        if self._registry.active_challenge.value is None:
            return 0

        logger.debug("Forwarding %d overflow step(s) to the active challenge", new_overflow)
        self._pets.apply_overflow(new_overflow, now)
        return new_overflow

    def process_overflow(self) -> int:
        """Move today's not-yet-banked overflow into the wallet."""
        pending = self._ledger.overflow - self._ledger.flushed_overflow
        if pending <= 0:
            return 0
        self._ledger.add_to_wallet(pending)
        self._ledger.mark_overflow_flushed(pending)
        return pending

    def try_spend_food(self, amount: int) -> bool:
        if not self._ledger.is_quota_met:
            return False
        return self._ledger.try_spend_from_wallet(amount)

    def check_day_rollover(self, now: datetime | None = None) -> bool:
        today = day_marker(resolve_now(now, self._clock))
        stored = self._ledger.today_date.value
        if today == stored:
            return False

        flushed = self.process_overflow()
        self._ledger.reset_daily(today)
        logger.info("Day rollover %s -> %s (flushed %d overflow into wallet)", stored, today, flushed)
        return True

    def sync_daily_quota_from_pets(self) -> int:
        total = sum(p.daily_requirement for p in self._registry.owned_pets.value if p.is_owned)
        self._ledger.set_daily_quota(total)
        return self._ledger.daily_quota.value
