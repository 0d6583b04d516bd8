"""Handler registry: (phase action, role name) -> handler.

Replaces a per-phase string switch. The registry is checked against the rule
table's phases before any resolution so a phase naming a role without a
handler fails loudly instead of silently skipping that role.
"""

import logging
from typing import Iterable, Optional

from nightfall.models.rules import OrderOfOperation, PhaseAction
from nightfall.validation.exceptions import DataIntegrityError
from nightfall.handlers.base import NightPhaseHandler
from nightfall.handlers.arsonist_handler import ArsonistDouseHandler, ArsonistLightHandler
from nightfall.handlers.block_handlers import ConsortHandler, EscortHandler, JailkeeperHandler
from nightfall.handlers.heal_handlers import DoctorHandler
from nightfall.handlers.info_handlers import (
    BartenderHandler,
    BloodhoundHandler,
    ClairvoyantHandler,
    FramerHandler,
    GravediggerHandler,
    GraverobberHandler,
    SeerHandler,
)
from nightfall.handlers.kill_handlers import (
    AlphaWolfHandler,
    GluttonHandler,
    HunterHandler,
    HypnotistHandler,
    MurdererHandler,
    PlagueBringerHandler,
    SerialKillerHandler,
    VigilanteHandler,
)
from nightfall.handlers.movement_handlers import (
    LocksmithHandler,
    LookoutHandler,
    OrphanHandler,
    PatrolmanHandler,
    SleepwalkerHandler,
    StalkerHandler,
    VeteranHandler,
)

logger = logging.getLogger(__name__)


class HandlerRegistry:
    """Maps each phase action to the role handlers that run in it."""

    def __init__(self) -> None:
        self._handlers: dict[PhaseAction, dict[str, NightPhaseHandler]] = {
            action: {} for action in PhaseAction
        }

    def register(self, action: PhaseAction, handler: NightPhaseHandler) -> None:
        """Register a handler under its ``role_name`` for one phase action.

        Raises:
            DataIntegrityError: if the role already has a handler there
        """
        by_role = self._handlers[action]
        if handler.role_name in by_role:
            raise DataIntegrityError(
                f"Duplicate handler for {handler.role_name} in {action.value} phase"
            )
        by_role[handler.role_name] = handler

    def get(self, action: PhaseAction, role_name: str) -> Optional[NightPhaseHandler]:
        return self._handlers[action].get(role_name)

    def roles_for(self, action: PhaseAction) -> list[str]:
        return list(self._handlers[action])

    def check_phases(self, phases: Iterable[OrderOfOperation]) -> None:
        """Make sure every role a phase names has a handler for that phase.

        Raises:
            DataIntegrityError: listing every (phase, role) without a handler
        """
        missing = [
            f"{phase.name} ({phase.action.value}): {role_name}"
            for phase in phases
            for role_name in phase.roles
            if self.get(phase.action, role_name) is None
        ]
        if missing:
            raise DataIntegrityError(
                "No handler registered for: " + "; ".join(missing)
            )


def create_default_registry() -> HandlerRegistry:
    """Registry with a handler for every acting role."""
    registry = HandlerRegistry()

    registry.register(PhaseAction.LIGHT, ArsonistLightHandler())

    for handler in (
        LookoutHandler(),
        VeteranHandler(),
        StalkerHandler(),
        LocksmithHandler(),
        PatrolmanHandler(),
        SleepwalkerHandler(),
        OrphanHandler(),
    ):
        registry.register(PhaseAction.INFO_AND_MOVEMENT, handler)

    for handler in (JailkeeperHandler(), EscortHandler(), ConsortHandler()):
        registry.register(PhaseAction.BLOCK, handler)

    for handler in (
        FramerHandler(),
        SeerHandler(),
        BartenderHandler(),
        GravediggerHandler(),
        GraverobberHandler(),
        ClairvoyantHandler(),
        BloodhoundHandler(),
    ):
        registry.register(PhaseAction.INFO, handler)

    for handler in (
        HypnotistHandler(),
        HunterHandler(),
        VigilanteHandler(),
        ArsonistDouseHandler(),
        PlagueBringerHandler(),
        SerialKillerHandler(),
        MurdererHandler(),
        GluttonHandler(),
        AlphaWolfHandler(),
    ):
        registry.register(PhaseAction.KILL, handler)

    registry.register(PhaseAction.HEAL, DoctorHandler())

    logger.debug(
        "Default handler registry built: %s",
        {action.value: len(registry.roles_for(action)) for action in PhaseAction},
    )
    return registry


__all__ = ["HandlerRegistry", "create_default_registry"]
