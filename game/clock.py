"""Wall-clock helpers. The core never reads the clock globally; it is injected."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_aware(now: datetime) -> datetime:
    """Naive datetimes are taken to be UTC so they compare with stored stamps."""
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def resolve_now(now: datetime | None, clock: Clock) -> datetime:
    return as_aware(now if now is not None else clock())


def day_marker(now: datetime) -> date:
    """Calendar day ``now`` falls on, in its own timezone."""
    return as_aware(now).date()


def whole_days_between(start: datetime, end: datetime) -> int:
    """Full days from ``start`` until ``end``, never negative."""
    delta = as_aware(end) - as_aware(start)
    return max(0, delta.days)


def parse_iso(ts: str) -> datetime | None:
    if not ts:
        return None
    raw = ts.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(raw)
    except ValueError:
        return None
    return as_aware(dt)
