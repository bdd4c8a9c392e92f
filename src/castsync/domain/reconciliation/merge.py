"""Merge stage: combine retained manual entities with freshly linked ones."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from castsync.domain.model import EntityOrigin

if TYPE_CHECKING:
    from collections.abc import Iterable

    from castsync.domain.model import Entity, PlacementPolicy


def reconcile_entities(
    previous: Iterable[Entity],
    linked: Iterable[Entity],
    *,
    connected: bool,
    placement: PlacementPolicy,
) -> tuple[Entity, ...]:
    """Return the unsorted, unindexed merged list.

    Previously linked entities are always dropped, including ones a panel
    edited in place; they only come back through ``linked``. Without an active
    connection ``linked`` is ignored entirely.
    """

    blocks: dict[EntityOrigin, tuple[Entity, ...]] = {
        EntityOrigin.MANUAL: tuple(entity for entity in previous if entity.is_manual),
        EntityOrigin.LINKED: (
            tuple(_as_linked(entity) for entity in linked) if connected else ()
        ),
    }
    first, second = placement.block_order
    return (*blocks[first], *blocks[second])


def _as_linked(entity: Entity) -> Entity:
    if entity.is_linked:
        return entity
    return replace(entity, origin=EntityOrigin.LINKED)
