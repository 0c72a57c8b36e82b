"""Configuration loading from settings.yaml and .env."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from pets.catalog import AnimalCatalog
from pets.coordinator import DEFAULT_BANK_PERCENTAGE, DEFAULT_CHALLENGE_DAYS, DEFAULT_COOLDOWN_DAYS

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"

_ENV_OVERRIDES = {
    "challenge_days": "STEP_PET_CHALLENGE_DAYS",
    "cooldown_days": "STEP_PET_COOLDOWN_DAYS",
    "bank_percentage": "STEP_PET_BANK_PERCENTAGE",
    "log_file": "STEP_PET_LOG_FILE",
}


def load_config(
    config_dir: str | Path | None = None,
) -> dict:
    """Load settings.yaml and .env, return merged config dict.

    An explicit ``config_dir`` must contain settings.yaml. Without one, a
    missing default directory (e.g. a non-editable install) yields built-in
    defaults plus any environment overrides.
    """
    explicit = config_dir is not None
    config_dir = Path(config_dir) if explicit else DEFAULT_CONFIG_DIR

    # Load .env (silently skip if missing)
    env_path = config_dir / ".env"
    load_dotenv(env_path)

    settings_path = config_dir / "settings.yaml"
    if settings_path.exists():
        with open(settings_path, encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    elif explicit:
        raise FileNotFoundError(f"Config not found: {settings_path}")
    else:
        logger.debug("No %s; using built-in defaults", settings_path)
        cfg = {}

    # Env vars win over the yaml; kept apart so callers can tell where a value came from
    cfg["_overrides"] = {
        key: os.environ[var] for key, var in _ENV_OVERRIDES.items() if os.getenv(var)
    }

    return cfg


@dataclass
class GameSettings:
    """Typed tunables for one session."""

    challenge_days: int = DEFAULT_CHALLENGE_DAYS
    cooldown_days: int = DEFAULT_COOLDOWN_DAYS
    bank_percentage: float = DEFAULT_BANK_PERCENTAGE
    starting_wallet: int = 0
    log_file: str | None = None
    catalog: AnimalCatalog = field(default_factory=AnimalCatalog.default)

    @classmethod
    def from_config(cls, cfg: dict[str, Any] | None) -> GameSettings:
        cfg = cfg or {}
        challenge_cfg = cfg.get("challenge", {}) or {}
        economy_cfg = cfg.get("economy", {}) or {}
        overrides = cfg.get("_overrides", {}) or {}

        def pick(key: str, section: dict[str, Any], default: Any) -> Any:
            if key in overrides:
                return overrides[key]
            return section.get(key, default)

        catalog = AnimalCatalog.from_config(cfg.get("animals"))
        try:
            settings = cls(
                challenge_days=int(pick("challenge_days", challenge_cfg, DEFAULT_CHALLENGE_DAYS)),
                cooldown_days=int(pick("cooldown_days", challenge_cfg, DEFAULT_COOLDOWN_DAYS)),
                bank_percentage=float(pick("bank_percentage", challenge_cfg, DEFAULT_BANK_PERCENTAGE)),
                starting_wallet=int(economy_cfg.get("starting_wallet", 0)),
                log_file=pick("log_file", cfg.get("storage", {}) or {}, None),
                catalog=catalog,
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid game settings: {e}") from e

        if settings.challenge_days <= 0 or settings.cooldown_days < 0:
            raise ValueError("challenge_days must be positive and cooldown_days non-negative")
        if not 0 <= settings.bank_percentage <= 1:
            raise ValueError(f"bank_percentage must be within [0, 1], got {settings.bank_percentage}")

        logger.debug(
            "Settings: challenge=%dd cooldown=%dd bank=%.2f animals=%d",
            settings.challenge_days,
            settings.cooldown_days,
            settings.bank_percentage,
            len(settings.catalog),
        )
        return settings
