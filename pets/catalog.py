"""Static animal catalog: what each kind costs per day and takes to unlock."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterator, Mapping

from .models import AnimalKind

logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    """Raised for a catalog entry that cannot be used."""


@dataclass(frozen=True)
class AnimalDefinition:
    kind: AnimalKind
    display_name: str
    daily_requirement: int
    unlock_goal: int  # 0 = starter pet, no challenge needed
    unlock_days: int | None = None  # per-kind override of the challenge window

    @property
    def is_starter(self) -> bool:
        return self.unlock_goal == 0


_DEFAULTS: dict[AnimalKind, tuple[int, int]] = {
    AnimalKind.PUPPY: (300, 0),
    AnimalKind.KITTEN: (300, 0),
    AnimalKind.BUNNY: (400, 0),
    AnimalKind.DUCKLING: (400, 8000),
    AnimalKind.BABY_GIRAFFE: (600, 15000),
    AnimalKind.BABY_ELEPHANT: (800, 20000),
    AnimalKind.BABY_PENGUIN: (700, 25000),
    AnimalKind.BABY_PANDA: (1000, 35000),
}


class AnimalCatalog:
    """Read-only lookup of ``AnimalDefinition`` by kind."""

    def __init__(self, definitions: Mapping[AnimalKind, AnimalDefinition]):
        if not any(d.is_starter for d in definitions.values()):
            raise CatalogError("Catalog needs at least one starter animal (unlock_goal 0)")
        self._definitions = dict(definitions)

    def __contains__(self, kind: object) -> bool:
        return kind in self._definitions

    def __iter__(self) -> Iterator[AnimalDefinition]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)

    def get(self, kind: AnimalKind) -> AnimalDefinition | None:
        return self._definitions.get(kind)

    def starters(self) -> list[AnimalDefinition]:
        return [d for d in self if d.is_starter]

    def challenge_animals(self) -> list[AnimalDefinition]:
        return [d for d in self if not d.is_starter]

    @classmethod
    def default(cls) -> AnimalCatalog:
        return cls(
            {
                kind: AnimalDefinition(kind, kind.value, daily, goal)
                for kind, (daily, goal) in _DEFAULTS.items()
            }
        )

    @classmethod
    def from_config(cls, raw: Mapping[str, Any] | None) -> AnimalCatalog:
        """Build from the ``animals`` section of settings.yaml.

        Unknown keys raise ``UnknownAnimalKindError``; that is a configuration
        mistake, not something to skip over.
        """
        if not raw:
            return cls.default()

        definitions: dict[AnimalKind, AnimalDefinition] = {}
        for key, entry in raw.items():
            kind = AnimalKind.parse(key)
            if not isinstance(entry, Mapping):
                raise CatalogError(f"Catalog entry for {key!r} must be a mapping, got {type(entry).__name__}")
            try:
                daily = int(entry["daily_requirement"])
                goal = int(entry.get("unlock_goal", 0))
            except KeyError as e:
                raise CatalogError(f"Catalog entry for {key!r} is missing {e.args[0]!r}") from e
            except (TypeError, ValueError) as e:
                raise CatalogError(f"Catalog entry for {key!r} has a non-integer value") from e
            if daily < 0 or goal < 0:
                raise CatalogError(f"Catalog entry for {key!r} has a negative value")

            days = entry.get("unlock_days")
            definitions[kind] = AnimalDefinition(
                kind=kind,
                display_name=str(entry.get("display_name") or kind.value),
                daily_requirement=daily,
                unlock_goal=goal,
                unlock_days=int(days) if days is not None else None,
            )

        logger.debug("Loaded catalog with %d animal(s)", len(definitions))
        return cls(definitions)
