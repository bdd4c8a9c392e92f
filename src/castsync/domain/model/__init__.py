"""Domain model for entity reconciliation."""

from __future__ import annotations

from .entity import (
    ORDINAL_PREFIX,
    PLACEHOLDER_NAME,
    Entity,
    format_ordinal,
    new_identity,
)
from .enums import EntityOrigin, MoveDirection, PlacementPolicy

__all__ = [
    "ORDINAL_PREFIX",
    "PLACEHOLDER_NAME",
    "Entity",
    "EntityOrigin",
    "MoveDirection",
    "PlacementPolicy",
    "format_ordinal",
    "new_identity",
]
