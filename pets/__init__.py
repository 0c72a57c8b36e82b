"""Pet records, the animal catalog, the registry and the challenge rules."""

from .catalog import AnimalCatalog, AnimalDefinition, CatalogError
from .coordinator import ChallengeOutcome, PetCoordinator, banked_share
from .models import AnimalKind, PetRecord, UnknownAnimalKindError
from .registry import PetRegistry, RegistryInvariantError

__all__ = [
    "AnimalCatalog",
    "AnimalDefinition",
    "AnimalKind",
    "CatalogError",
    "ChallengeOutcome",
    "PetCoordinator",
    "PetRecord",
    "PetRegistry",
    "RegistryInvariantError",
    "UnknownAnimalKindError",
    "banked_share",
]
