"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityOrigin(StrEnum):
    """Where an entity in a node's list comes from."""

    MANUAL = "manual"
    LINKED = "linked"


class PlacementPolicy(StrEnum):
    """Which origin block comes first in a node's merged list."""

    LINKED_BEFORE_MANUAL = "linked_before_manual"
    MANUAL_BEFORE_LINKED = "manual_before_linked"

    @property
    def block_order(self) -> tuple[EntityOrigin, EntityOrigin]:
        if self is PlacementPolicy.LINKED_BEFORE_MANUAL:
            return (EntityOrigin.LINKED, EntityOrigin.MANUAL)
        return (EntityOrigin.MANUAL, EntityOrigin.LINKED)


class MoveDirection(StrEnum):
    UP = "up"
    DOWN = "down"
    TOP = "top"
    BOTTOM = "bottom"
