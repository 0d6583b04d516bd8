"""Persistence port and implementations."""

from nightfall.storage.base import GameRepository, PersistenceError
from nightfall.storage.memory import InMemoryGameRepository
from nightfall.storage.scenario import Scenario, load_scenario

__all__ = [
    "GameRepository",
    "PersistenceError",
    "InMemoryGameRepository",
    "Scenario",
    "load_scenario",
]
