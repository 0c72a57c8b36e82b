"""Pet registry: the only owner of ``PetRecord`` instances.

Every change goes through ``commit``, which validates the whole new state and
then publishes fresh immutable snapshots. Subscribers therefore never observe
a half-applied transition.
"""

from __future__ import annotations

import logging
from typing import Iterable

from reactive import ReactiveProperty, ReadOnlyReactiveProperty, computed

from .models import AnimalKind, PetRecord

logger = logging.getLogger(__name__)

_KEEP = object()


class RegistryInvariantError(RuntimeError):
    """A commit would leave the registry in an impossible state."""


def _check_invariants(records: dict[str, PetRecord], active_id: str | None) -> None:
    challenging = [r.id for r in records.values() if r.unlock_deadline is not None]
    if len(challenging) > 1:
        raise RegistryInvariantError(f"More than one active challenge: {challenging}")
    if challenging != ([active_id] if active_id else []):
        raise RegistryInvariantError(
            f"Active challenge slot {active_id!r} does not match challenging records {challenging}"
        )

    mains = [r for r in records.values() if r.is_main_pet]
    if len(mains) > 1:
        raise RegistryInvariantError("More than one main pet")

    for r in records.values():
        if r.is_owned and r.unlock_deadline is not None:
            raise RegistryInvariantError(f"Pet {r.id} is owned and challenging at once")
        if r.is_main_pet and not r.is_owned:
            raise RegistryInvariantError(f"Main pet {r.id} must be owned")
        if r.is_owned and r.unlock_progress != 0:
            raise RegistryInvariantError(f"Owned pet {r.id} still carries unlock progress")
        if r.unlock_progress < 0 or r.banked_progress < 0:
            raise RegistryInvariantError(f"Pet {r.id} has negative progress")


def _total_requirement(owned: tuple[PetRecord, ...]) -> int:
    return sum(p.daily_requirement for p in owned if p.is_owned)


def _pick_current(index: int, owned: tuple[PetRecord, ...]) -> PetRecord | None:
    if 0 <= index < len(owned):
        return owned[index]
    return None


def _pick_main(owned: tuple[PetRecord, ...]) -> PetRecord | None:
    return next((p for p in owned if p.is_main_pet), None)


class PetRegistry:
    """Pet records keyed by id, plus the single active-challenge slot."""

    def __init__(self) -> None:
        self._records: dict[str, PetRecord] = {}
        self._active_id: str | None = None
        # Owned pets in the order they were acquired
        self._owned_order: list[str] = []

        self._owned: ReactiveProperty[tuple[PetRecord, ...]] = ReactiveProperty((), name="owned_pets")
        self._active: ReactiveProperty[PetRecord | None] = ReactiveProperty(None, name="active_challenge")
        self._available: ReactiveProperty[tuple[PetRecord, ...]] = ReactiveProperty((), name="available_pets")
        self._current_index = ReactiveProperty(0, name="current_pet_index")

        self.current_pet = computed(_pick_current, self._current_index, self._owned, name="current_pet")
        self.main_pet = computed(_pick_main, self._owned, name="main_pet")
        self.has_active_challenge = computed(lambda c: c is not None, self._active, name="has_active_challenge")
        self.total_daily_requirement = computed(_total_requirement, self._owned, name="total_daily_requirement")

    # --- Read side ---

    @property
    def owned_pets(self) -> ReadOnlyReactiveProperty[tuple[PetRecord, ...]]:
        return self._owned.read_only()

    @property
    def active_challenge(self) -> ReadOnlyReactiveProperty[PetRecord | None]:
        return self._active.read_only()

    @property
    def available_pets(self) -> ReadOnlyReactiveProperty[tuple[PetRecord, ...]]:
        return self._available.read_only()

    @property
    def current_pet_index(self) -> ReadOnlyReactiveProperty[int]:
        return self._current_index.read_only()

    def get(self, pet_id: str) -> PetRecord | None:
        return self._records.get(pet_id)

    def find_by_kind(self, kind: AnimalKind) -> PetRecord | None:
        return next((r for r in self._records.values() if r.animal_kind == kind), None)

    def records(self) -> tuple[PetRecord, ...]:
        return tuple(self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    # --- Write side ---

    def commit(self, *records: PetRecord, active_id: str | None | object = _KEEP) -> None:
        """Upsert ``records`` and optionally move the active-challenge slot.

        Validation runs against the would-be state; on failure nothing changes.
        """
        staged = dict(self._records)
        for record in records:
            staged[record.id] = record
        new_active = self._active_id if active_id is _KEEP else active_id
        if new_active is not None and new_active not in staged:
            raise RegistryInvariantError(f"Active challenge {new_active!r} is not a known pet")

        _check_invariants(staged, new_active)

        self._records = staged
        self._active_id = new_active
        for record in records:
            if record.is_owned and record.id not in self._owned_order:
                self._owned_order.append(record.id)
        logger.debug("Registry commit: %d record(s), active=%s", len(records), new_active)
        self._publish()

    def set_current_pet_index(self, index: int) -> bool:
        if not 0 <= index < len(self._owned.value):
            return False
        self._current_index.set(index)
        return True

    def _publish(self) -> None:
        values = self._records.values()
        owned = (self._records[pet_id] for pet_id in self._owned_order)
        self._owned.set(tuple(r for r in owned if r.is_owned))
        self._active.set(self._records[self._active_id] if self._active_id else None)
        self._available.set(
            tuple(r for r in values if not r.is_owned and not r.is_main_pet and r.id != self._active_id)
        )
