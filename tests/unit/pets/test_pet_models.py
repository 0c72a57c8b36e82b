"""Tests for pet records and animal kinds."""

from datetime import datetime, timedelta, timezone

import pytest

from pets import AnimalKind, PetRecord, UnknownAnimalKindError

NOW = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


class TestAnimalKindParse:
    def test_accepts_catalog_key(self):
        assert AnimalKind.parse("BabyPanda") is AnimalKind.BABY_PANDA

    def test_accepts_member_name_and_case_variants(self):
        assert AnimalKind.parse("baby_panda") is AnimalKind.BABY_PANDA
        assert AnimalKind.parse("baby-giraffe") is AnimalKind.BABY_GIRAFFE
        assert AnimalKind.parse("duckling") is AnimalKind.DUCKLING

    def test_passes_members_through(self):
        assert AnimalKind.parse(AnimalKind.PUPPY) is AnimalKind.PUPPY

    @pytest.mark.parametrize("key", ["Dragon", "", None, 3])
    def test_rejects_unknown_keys(self, key):
        with pytest.raises(UnknownAnimalKindError) as exc:
            AnimalKind.parse(key)
        assert exc.value.key == key

    def test_error_is_a_value_error(self):
        assert issubclass(UnknownAnimalKindError, ValueError)


def _challenger(**overrides) -> PetRecord:
    fields = dict(
        animal_kind=AnimalKind.DUCKLING,
        display_name="Duckling",
        daily_requirement=400,
        unlock_goal=8000,
    )
    fields.update(overrides)
    return PetRecord(**fields)


def test_records_get_distinct_ids():
    assert _challenger().id != _challenger().id


def test_evolve_returns_new_record_with_same_id():
    pet = _challenger()
    moved = pet.evolve(unlock_progress=10)
    assert moved.id == pet.id
    assert moved.unlock_progress == 10
    assert pet.unlock_progress == 0


def test_challenge_state_flags():
    pet = _challenger(unlock_deadline=NOW + timedelta(days=14), unlock_progress=3000)
    assert pet.is_in_challenge
    assert not pet.is_starter
    assert pet.remaining_goal == 5000
    assert pet.days_remaining(NOW) == 14
    assert pet.days_remaining(NOW + timedelta(days=20)) == 0
    assert not pet.can_start_challenge(NOW)


def test_cooldown_gates_restart():
    pet = _challenger(cooldown_until=NOW + timedelta(days=14))
    assert pet.is_on_cooldown(NOW)
    assert not pet.can_start_challenge(NOW)
    assert pet.can_start_challenge(NOW + timedelta(days=14, seconds=1))


def test_naive_now_is_treated_as_utc():
    pet = _challenger(cooldown_until=NOW + timedelta(hours=1))
    assert pet.is_on_cooldown(datetime(2026, 3, 2, 9, 30))


def test_starter_cannot_be_challenged():
    pet = PetRecord(animal_kind=AnimalKind.PUPPY, display_name="Buddy", daily_requirement=300)
    assert pet.is_starter
    assert not pet.can_start_challenge(NOW)
