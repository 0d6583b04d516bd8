"""Night phase handlers for the nightfall engine.

Each role that acts at night has one handler per phase it acts in. Handlers
share the HandlerResult type and RoleHandler helpers from base.py and are
looked up through the HandlerRegistry.
"""

from nightfall.handlers.base import (
    BLOCKED,
    FAILED,
    KILLER_ROLES,
    HandlerResult,
    NightPhaseHandler,
    RoleHandler,
)
from nightfall.handlers.arsonist_handler import ArsonistDouseHandler, ArsonistLightHandler
from nightfall.handlers.block_handlers import (
    NEUTRAL_KILLERS,
    ConsortHandler,
    EscortHandler,
    JailkeeperHandler,
)
from nightfall.handlers.heal_handlers import DoctorHandler
from nightfall.handlers.info_handlers import (
    BartenderHandler,
    BloodhoundHandler,
    ClairvoyantHandler,
    FramerHandler,
    GravediggerHandler,
    GraverobberHandler,
    SeerHandler,
    revealed_role,
)
from nightfall.handlers.kill_handlers import (
    AlphaWolfHandler,
    GluttonHandler,
    HunterHandler,
    HypnotistHandler,
    KillerHandler,
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
from nightfall.handlers.registry import HandlerRegistry, create_default_registry

__all__ = [
    # Base
    "BLOCKED",
    "FAILED",
    "KILLER_ROLES",
    "HandlerResult",
    "NightPhaseHandler",
    "RoleHandler",
    # Light
    "ArsonistLightHandler",
    # Info and movement
    "LookoutHandler",
    "VeteranHandler",
    "StalkerHandler",
    "LocksmithHandler",
    "PatrolmanHandler",
    "SleepwalkerHandler",
    "OrphanHandler",
    # Block
    "NEUTRAL_KILLERS",
    "JailkeeperHandler",
    "EscortHandler",
    "ConsortHandler",
    # Info
    "revealed_role",
    "FramerHandler",
    "SeerHandler",
    "BartenderHandler",
    "GravediggerHandler",
    "GraverobberHandler",
    "ClairvoyantHandler",
    "BloodhoundHandler",
    # Kill
    "KillerHandler",
    "HypnotistHandler",
    "HunterHandler",
    "VigilanteHandler",
    "ArsonistDouseHandler",
    "PlagueBringerHandler",
    "SerialKillerHandler",
    "MurdererHandler",
    "GluttonHandler",
    "AlphaWolfHandler",
    # Heal
    "DoctorHandler",
    # Registry
    "HandlerRegistry",
    "create_default_registry",
]
