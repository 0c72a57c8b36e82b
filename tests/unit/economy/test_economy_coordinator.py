"""Tests for step, overflow, spending and rollover rules."""

from datetime import date, datetime, timedelta, timezone

from economy import EconomyCoordinator, EconomyLedger
from pets import AnimalCatalog, AnimalKind, PetCoordinator, PetRegistry

NOW = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


def _catalog(goal: int = 8000) -> AnimalCatalog:
    return AnimalCatalog.from_config(
        {
            "Puppy": {"daily_requirement": 1000, "unlock_goal": 0},
            "Duckling": {"daily_requirement": 400, "unlock_goal": goal},
        }
    )


def _world(goal: int = 8000):
    ledger = EconomyLedger(NOW.date())
    registry = PetRegistry()
    economy = EconomyCoordinator(ledger, registry, clock=lambda: NOW)
    pets = PetCoordinator(
        registry,
        _catalog(goal),
        clock=lambda: NOW,
        on_ownership_changed=economy.sync_daily_quota_from_pets,
    )
    economy.attach_pets(pets)
    pets.select_main_pet(AnimalKind.PUPPY, "Buddy")
    return ledger, registry, economy, pets


def test_main_pet_sets_quota():
    ledger, _, _, _ = _world()
    assert ledger.daily_quota.value == 1000


def test_new_overflow_goes_to_active_challenge():
    ledger, registry, economy, pets = _world()
    economy.record_steps(950)
    assert pets.start_challenge(AnimalKind.DUCKLING)

    forwarded = economy.record_steps(100)

    assert ledger.today_steps.value == 1050
    assert forwarded == 50
    assert registry.active_challenge.value.unlock_progress == 50


def test_overflow_without_challenge_waits_for_wallet():
    ledger, _, economy, _ = _world()
    economy.record_steps(950)
    assert economy.record_steps(100) == 0
    assert ledger.overflow == 50

    assert economy.process_overflow() == 50
    assert ledger.wallet.value == 50
    # Repeating without new steps must not bank the same overflow twice
    assert economy.process_overflow() == 0
    assert ledger.wallet.value == 50

    economy.record_steps(20)
    assert economy.process_overflow() == 20
    assert ledger.wallet.value == 70


def test_repeated_steps_never_double_count_overflow():
    _, registry, economy, pets = _world()
    pets.start_challenge(AnimalKind.DUCKLING)

    total = sum(economy.record_steps(n) for n in (500, 600, 300, 0, 200))

    assert total == 1600 - 1000
    assert registry.active_challenge.value.unlock_progress == 600


def test_overflow_from_before_challenge_is_not_forwarded():
    _, registry, economy, pets = _world()
    economy.record_steps(1200)
    pets.start_challenge(AnimalKind.DUCKLING)

    assert economy.record_steps(100) == 100
    assert registry.active_challenge.value.unlock_progress == 100


def test_overflow_can_complete_challenge_and_raise_quota():
    ledger, registry, economy, pets = _world(goal=300)
    pets.start_challenge(AnimalKind.DUCKLING)

    economy.record_steps(1300)

    assert registry.active_challenge.value is None
    kinds = [p.animal_kind for p in registry.owned_pets.value]
    assert kinds == [AnimalKind.PUPPY, AnimalKind.DUCKLING]
    assert ledger.daily_quota.value == 1400


def test_spend_requires_quota_met():
    ledger, _, economy, _ = _world()
    ledger.add_to_wallet(500)
    economy.record_steps(999)
    assert economy.try_spend_food(10) is False
    assert ledger.wallet.value == 500

    economy.record_steps(1)
    assert economy.try_spend_food(10) is True
    assert ledger.wallet.value == 490
    assert economy.try_spend_food(1000) is False


def test_day_rollover_flushes_overflow_then_resets():
    ledger, _, economy, _ = _world()
    economy.record_steps(1030)

    assert economy.check_day_rollover(NOW + timedelta(hours=2)) is False
    assert ledger.today_steps.value == 1030

    assert economy.check_day_rollover(NOW + timedelta(days=1)) is True
    assert ledger.wallet.value == 30
    assert ledger.today_steps.value == 0
    assert ledger.today_date.value == date(2026, 3, 3)
    assert ledger.lifetime_steps.value == 1030


def test_rollover_after_manual_flush_does_not_bank_twice():
    ledger, _, economy, _ = _world()
    economy.record_steps(1030)
    economy.process_overflow()
    economy.check_day_rollover(NOW + timedelta(days=1))
    assert ledger.wallet.value == 30


def test_sync_quota_ignores_challenge_pet():
    ledger, _, economy, pets = _world()
    pets.start_challenge(AnimalKind.DUCKLING)
    assert economy.sync_daily_quota_from_pets() == 1000
    assert ledger.daily_quota.value == 1000


def test_ledger_notifications_precede_registry_notifications():
    ledger, registry, economy, pets = _world()
    pets.start_challenge(AnimalKind.DUCKLING)
    economy.record_steps(1000)

    events = []
    ledger.today_steps.subscribe(lambda v: events.append("steps"))
    registry.active_challenge.subscribe(lambda v: events.append("challenge"))
    events.clear()

    economy.record_steps(10)
    assert events == ["steps", "challenge"]


def test_negative_delta_on_fresh_day_is_ignored():
    ledger, _, economy, _ = _world()
    assert economy.record_steps(-500) == 0
    assert ledger.today_steps.value == 0
    assert ledger.lifetime_steps.value == 0


def test_zero_delta_changes_nothing():
    ledger, registry, economy, pets = _world()
    pets.start_challenge(AnimalKind.DUCKLING)
    economy.record_steps(1200)
    steps = []
    ledger.today_steps.subscribe(steps.append)
    steps.clear()

    assert economy.record_steps(0) == 0
    assert steps == []
    assert registry.active_challenge.value.unlock_progress == 200


def test_non_monotone_deltas_forward_exactly_the_overflow():
    ledger, registry, economy, pets = _world()
    pets.start_challenge(AnimalKind.DUCKLING)

    total = sum(economy.record_steps(n) for n in (1500, -300, 300))

    assert ledger.today_steps.value == 1800
    assert total == ledger.overflow == 800
    assert registry.active_challenge.value.unlock_progress == 800
