"""
Presence subsystem exports.
"""

from .models import Identity, Position, RegistryEntry, UserPosition
from .registry import POSITION_TTL_SECONDS, PositionRegistry
from .sweeper import DEFAULT_SWEEP_INTERVAL, RegistrySweeper

__all__ = [
    "DEFAULT_SWEEP_INTERVAL",
    "Identity",
    "POSITION_TTL_SECONDS",
    "Position",
    "PositionRegistry",
    "RegistryEntry",
    "RegistrySweeper",
    "UserPosition",
]
