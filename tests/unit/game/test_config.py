"""Tests for settings loading."""

from pathlib import Path

import pytest

from game.config import GameSettings, load_config
from pets import AnimalKind, UnknownAnimalKindError

_SETTINGS = """
challenge:
  challenge_days: 10
  cooldown_days: 5
  bank_percentage: 0.2
economy:
  starting_wallet: 40
animals:
  Puppy:
    daily_requirement: 300
  Duckling:
    daily_requirement: 400
    unlock_goal: 6000
"""

_OVERRIDE_VARS = ("STEP_PET_CHALLENGE_DAYS", "STEP_PET_COOLDOWN_DAYS", "STEP_PET_BANK_PERCENTAGE", "STEP_PET_LOG_FILE")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    # setenv then delenv so anything load_dotenv writes is undone afterwards
    for var in _OVERRIDE_VARS:
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)


def _write(tmp_path: Path, text: str = _SETTINGS, env: str | None = None) -> Path:
    (tmp_path / "settings.yaml").write_text(text, encoding="utf-8")
    if env is not None:
        (tmp_path / ".env").write_text(env, encoding="utf-8")
    return tmp_path


def test_missing_settings_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path)


def test_settings_from_yaml(tmp_path):
    settings = GameSettings.from_config(load_config(_write(tmp_path)))
    assert settings.challenge_days == 10
    assert settings.cooldown_days == 5
    assert settings.bank_percentage == pytest.approx(0.2)
    assert settings.starting_wallet == 40
    assert settings.catalog.get(AnimalKind.DUCKLING).unlock_goal == 6000
    assert AnimalKind.BABY_PANDA not in settings.catalog


def test_env_file_overrides_yaml(tmp_path):
    cfg = load_config(_write(tmp_path, env="STEP_PET_COOLDOWN_DAYS=2\n"))
    assert cfg["_overrides"] == {"cooldown_days": "2"}
    assert GameSettings.from_config(cfg).cooldown_days == 2


def test_process_env_overrides_yaml(tmp_path, monkeypatch):
    monkeypatch.setenv("STEP_PET_CHALLENGE_DAYS", "21")
    settings = GameSettings.from_config(load_config(_write(tmp_path)))
    assert settings.challenge_days == 21


def test_shipped_settings_load():
    settings = GameSettings.from_config(load_config())
    assert settings.challenge_days == 14
    assert len(settings.catalog) == 8
    assert settings.catalog.get(AnimalKind.BABY_PANDA).display_name == "Baby Panda"


def test_empty_config_uses_defaults():
    settings = GameSettings.from_config({})
    assert (settings.challenge_days, settings.cooldown_days) == (14, 14)
    assert settings.bank_percentage == pytest.approx(0.10)


def test_unknown_animal_in_settings_fails(tmp_path):
    text = _SETTINGS + "  Dragon:\n    daily_requirement: 9000\n"
    with pytest.raises(UnknownAnimalKindError):
        GameSettings.from_config(load_config(_write(tmp_path, text)))


@pytest.mark.parametrize(
    "cfg",
    [
        {"challenge": {"challenge_days": 0}},
        {"challenge": {"cooldown_days": -1}},
        {"challenge": {"bank_percentage": 1.5}},
        {"challenge": {"challenge_days": "two weeks"}},
    ],
)
def test_invalid_tunables_raise(cfg):
    with pytest.raises(ValueError):
        GameSettings.from_config(cfg)


def test_missing_default_dir_falls_back_to_defaults(tmp_path, monkeypatch):
    monkeypatch.setattr("game.config.DEFAULT_CONFIG_DIR", tmp_path / "not-installed")
    cfg = load_config()
    assert cfg == {"_overrides": {}}
    settings = GameSettings.from_config(cfg)
    assert settings.challenge_days == 14
    assert len(settings.catalog) == len(GameSettings().catalog)


def test_default_dir_fallback_still_reads_env(tmp_path, monkeypatch):
    monkeypatch.setattr("game.config.DEFAULT_CONFIG_DIR", tmp_path)
    monkeypatch.setenv("STEP_PET_COOLDOWN_DAYS", "3")
    assert GameSettings.from_config(load_config()).cooldown_days == 3
