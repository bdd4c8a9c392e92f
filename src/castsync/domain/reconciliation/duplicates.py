"""Collision detection for panel warnings. Findings never block a commit."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from castsync.domain.model import Entity


def normalize_key(value: str) -> str:
    return value.strip().casefold()


@dataclass(frozen=True, slots=True)
class DuplicateReport:
    """Positions (into the indexed list) that share a key with another entry."""

    ordinal_positions: frozenset[int] = frozenset()
    name_positions: frozenset[int] = frozenset()
    identity_positions: frozenset[int] = frozenset()

    @property
    def flagged_positions(self) -> frozenset[int]:
        return self.ordinal_positions | self.name_positions | self.identity_positions

    @property
    def has_duplicates(self) -> bool:
        return bool(self.flagged_positions)

    def is_flagged(self, position: int) -> bool:
        return position in self.flagged_positions

    def flagged_identities(self, entities: Sequence[Entity]) -> frozenset[str]:
        return frozenset(entities[position].identity for position in self.flagged_positions)


def detect_duplicates(entities: Sequence[Entity]) -> DuplicateReport:
    return DuplicateReport(
        ordinal_positions=_colliding(entities, lambda entity: normalize_key(entity.ordinal)),
        name_positions=_colliding(entities, lambda entity: normalize_key(entity.display_name)),
        identity_positions=_colliding(entities, lambda entity: entity.identity),
    )


def _colliding(
    entities: Sequence[Entity],
    key: Callable[[Entity], str],
) -> frozenset[int]:
    keys = [key(entity) for entity in entities]
    counts = Counter(keys)
    return frozenset(position for position, value in enumerate(keys) if counts[value] > 1)
