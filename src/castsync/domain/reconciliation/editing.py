"""User edits made from a node's own panel.

Every function takes the node's current merged list and returns a new one;
the caller commits it and runs a pass to re-index.
"""

from __future__ import annotations

import re
from dataclasses import replace
from typing import TYPE_CHECKING, Final

from castsync.domain.model import (
    Entity,
    EntityOrigin,
    MoveDirection,
    format_ordinal,
    new_identity,
)

from .indexing import relabel_in_place

if TYPE_CHECKING:
    from collections.abc import Sequence

NEW_ENTITY_NAME: Final[str] = "New Entity"
EDITABLE_FIELDS: Final[frozenset[str]] = frozenset(
    {"display_name", "visual_prompt", "full_description", "passthrough"}
)
_NEW_ENTITY_PATTERN = re.compile(r"^New Entity\s*(\d*)$", re.IGNORECASE)


class UnknownEntityError(LookupError):
    """Raised when an edit targets an identity that is not in the list."""


def next_new_entity_name(entities: Sequence[Entity]) -> str:
    """``New Entity N`` with N one past the highest existing placeholder number."""

    highest = 0
    for entity in entities:
        match = _NEW_ENTITY_PATTERN.match(entity.display_name.strip())
        if match:
            highest = max(highest, int(match.group(1)) if match.group(1) else 1)
    return f"{NEW_ENTITY_NAME} {highest + 1}"


def add_manual_entity(
    entities: Sequence[Entity],
    *,
    display_name: str | None = None,
) -> tuple[Entity, ...]:
    name = display_name or next_new_entity_name(entities)
    created = Entity(
        identity=new_identity(),
        display_name=name,
        ordinal=format_ordinal(len(entities)),
        origin=EntityOrigin.MANUAL,
        passthrough={"originalName": name},
    )
    return (*entities, created)


def update_entity(
    entities: Sequence[Entity],
    identity: str,
    **changes: object,
) -> tuple[Entity, ...]:
    """Replace editable fields of one entity; ordinals and order stay as they are."""

    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise ValueError(f"Fields are not editable: {', '.join(sorted(unknown))}")
    position = _position_of(entities, identity)
    updated = list(entities)
    updated[position] = replace(entities[position], **changes)  # type: ignore[arg-type]
    return tuple(updated)


def remove_entity(entities: Sequence[Entity], identity: str) -> tuple[Entity, ...]:
    position = _position_of(entities, identity)
    return (*entities[:position], *entities[position + 1 :])


def move_entity(
    entities: Sequence[Entity],
    identity: str,
    direction: MoveDirection,
) -> tuple[Entity, ...]:
    """Move an entity inside its own origin block and renumber by position.

    Renumbering makes the new order survive the next pass's legacy-key sort.
    """

    position = _position_of(entities, identity)
    origin = entities[position].origin
    slots = [index for index, entity in enumerate(entities) if entity.origin is origin]
    block = [entities[index] for index in slots]

    current = slots.index(position)
    moving = block.pop(current)
    if direction is MoveDirection.TOP:
        target = 0
    elif direction is MoveDirection.BOTTOM:
        target = len(block)
    elif direction is MoveDirection.UP:
        target = max(0, current - 1)
    else:
        target = min(len(block), current + 1)
    block.insert(target, moving)

    reordered = list(entities)
    for index, entity in zip(slots, block, strict=True):
        reordered[index] = entity
    return relabel_in_place(reordered)


def embed_entity(entities: Sequence[Entity], identity: str) -> tuple[Entity, ...]:
    """Append a manual copy of a linked entity; the linked original stays in place."""

    source = entities[_position_of(entities, identity)]
    if source.is_manual:
        raise ValueError(f"Entity {identity!r} is already manual")
    copy = source.embedded().with_ordinal(format_ordinal(len(entities)))
    return (*entities, copy)


def clear_manual_entities(entities: Sequence[Entity]) -> tuple[Entity, ...]:
    return tuple(entity for entity in entities if entity.is_linked)


def _position_of(entities: Sequence[Entity], identity: str) -> int:
    for position, entity in enumerate(entities):
        if entity.identity == identity:
            return position
    raise UnknownEntityError(identity)
