"""Events package - night action inputs and resolution records."""

from .night_events import (
    NightAction,
    Death,
    PlayerResult,
    NightActionResult,
)

__all__ = [
    "NightAction",
    "Death",
    "PlayerResult",
    "NightActionResult",
]
