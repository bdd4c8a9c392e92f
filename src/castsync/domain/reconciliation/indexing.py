"""Index stage: order the merged list and relabel it ``Entity-1..n``.

Downstream prompt text references ordinals literally, so they are always
recomputed from position and never trusted from input.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Final

from castsync.domain.model import format_ordinal

if TYPE_CHECKING:
    from collections.abc import Iterable

    from castsync.domain.model import Entity, PlacementPolicy

MISSING_SORT_KEY: Final[int] = 99999
_DIGITS = re.compile(r"\d+")


def legacy_sort_key(entity: Entity) -> int:
    """First run of digits in the ordinal, else ``MISSING_SORT_KEY``.

    Legacy ``alias`` values arrive here already folded into ``ordinal`` by the
    payload decoder.
    """

    match = _DIGITS.search(entity.ordinal)
    return int(match.group()) if match else MISSING_SORT_KEY


def assign_ordinals(
    entities: Iterable[Entity],
    placement: PlacementPolicy,
) -> tuple[Entity, ...]:
    """Stable-sort by legacy key inside each origin block, then number densely."""

    block_rank = {origin: rank for rank, origin in enumerate(placement.block_order)}
    ordered = sorted(
        entities,
        key=lambda entity: (block_rank[entity.origin], legacy_sort_key(entity)),
    )
    return tuple(
        entity.with_ordinal(format_ordinal(position)) for position, entity in enumerate(ordered)
    )


def relabel_in_place(entities: Iterable[Entity]) -> tuple[Entity, ...]:
    """Number entities by their current position without reordering."""

    return tuple(
        entity.with_ordinal(format_ordinal(position)) for position, entity in enumerate(entities)
    )
