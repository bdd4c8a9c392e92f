"""
Entity value object:
one character or prop as it appears in a node's merged list.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Final
from uuid import uuid4

from castsync.domain.model.enums import EntityOrigin

if TYPE_CHECKING:
    from collections.abc import Mapping

ORDINAL_PREFIX: Final[str] = "Entity-"
PLACEHOLDER_NAME: Final[str] = "Unknown"


def new_identity(prefix: str = "char") -> str:
    return f"{prefix}-{uuid4().hex[:12]}"


def format_ordinal(position: int) -> str:
    """Return the ordinal token for a zero-based list ``position``."""
    return f"{ORDINAL_PREFIX}{position + 1}"


@dataclass(frozen=True, slots=True, kw_only=True)
class Entity:
    """An entity is compared field by field; ``identity`` is opaque to the engine."""

    identity: str
    display_name: str = PLACEHOLDER_NAME
    ordinal: str = ""
    origin: EntityOrigin = EntityOrigin.MANUAL
    visual_prompt: str = ""
    full_description: str = ""
    passthrough: Mapping[str, object] = field(default_factory=dict)

    @property
    def is_linked(self) -> bool:
        return self.origin is EntityOrigin.LINKED

    @property
    def is_manual(self) -> bool:
        return self.origin is EntityOrigin.MANUAL

    def with_ordinal(self, ordinal: str) -> Entity:
        if ordinal == self.ordinal:
            return self
        return replace(self, ordinal=ordinal)

    def embedded(self) -> Entity:
        """Return a manual copy with a fresh identity, detached from its source."""
        return replace(self, identity=new_identity(), origin=EntityOrigin.MANUAL)
