"""Economy ledger: wallet, today's steps against the quota, lifetime steps.

The ledger only stores and derives. Deciding when a day ends belongs to the
coordinator, which is handed the current time from outside.
"""

from __future__ import annotations

import logging
from datetime import date

from reactive import ReactiveProperty, ReadOnlyReactiveProperty, computed

logger = logging.getLogger(__name__)


def _overflow(steps: int, quota: int) -> int:
    return max(0, steps - quota)


def _until_quota(steps: int, quota: int) -> int:
    return max(0, quota - steps)


def _quota_met(steps: int, quota: int) -> bool:
    return steps >= quota


class EconomyLedger:
    """Observable economy state for one player session."""

    def __init__(self, today: date, *, wallet: int = 0, lifetime_steps: int = 0):
        self._wallet = ReactiveProperty(max(0, wallet), name="wallet")
        self._today_steps = ReactiveProperty(0, name="today_steps")
        self._daily_quota = ReactiveProperty(1, name="daily_quota")
        self._today_date = ReactiveProperty(today, name="today_date")
        self._lifetime_steps = ReactiveProperty(max(0, lifetime_steps), name="lifetime_steps")
        self._flushed_overflow = 0

        self.quota_met = computed(_quota_met, self._today_steps, self._daily_quota, name="quota_met")
        self.overflow_steps = computed(_overflow, self._today_steps, self._daily_quota, name="overflow")
        self.steps_until_quota = computed(_until_quota, self._today_steps, self._daily_quota, name="steps_until_quota")

    # --- Observables ---

    @property
    def wallet(self) -> ReadOnlyReactiveProperty[int]:
        return self._wallet.read_only()

    @property
    def today_steps(self) -> ReadOnlyReactiveProperty[int]:
        return self._today_steps.read_only()

    @property
    def daily_quota(self) -> ReadOnlyReactiveProperty[int]:
        return self._daily_quota.read_only()

    @property
    def today_date(self) -> ReadOnlyReactiveProperty[date]:
        return self._today_date.read_only()

    @property
    def lifetime_steps(self) -> ReadOnlyReactiveProperty[int]:
        return self._lifetime_steps.read_only()

    # --- Derived reads ---

    @property
    def is_quota_met(self) -> bool:
        return _quota_met(self._today_steps.value, self._daily_quota.value)

    @property
    def overflow(self) -> int:
        return _overflow(self._today_steps.value, self._daily_quota.value)

    @property
    def flushed_overflow(self) -> int:
        return self._flushed_overflow

    # --- Mutations ---

    def add_steps(self, amount: int) -> None:
        if amount <= 0:
            return
        self._today_steps.set(self._today_steps.value + amount)
        self._lifetime_steps.set(self._lifetime_steps.value + amount)

    def set_daily_quota(self, quota: int) -> None:
        previous = self._daily_quota.value
        self._daily_quota.set(max(1, quota))
        if previous != self._daily_quota.value:
            logger.debug("Daily quota: %d -> %d", previous, self._daily_quota.value)

    def add_to_wallet(self, amount: int) -> None:
        if amount <= 0:
            return
        previous = self._wallet.value
        self._wallet.set(previous + amount)
        logger.debug("Wallet: %d + %d = %d", previous, amount, self._wallet.value)

    def try_spend_from_wallet(self, amount: int) -> bool:
        if amount <= 0 or self._wallet.value < amount:
            return False
        previous = self._wallet.value
        self._wallet.set(previous - amount)
        logger.debug("Wallet: %d - %d = %d", previous, amount, self._wallet.value)
        return True

    def mark_overflow_flushed(self, amount: int) -> None:
        self._flushed_overflow += max(0, amount)

    def reset_daily(self, today: date) -> None:
        self._today_steps.set(0)
        self._today_date.set(today)
        self._flushed_overflow = 0
