"""Per-node-type configuration for entity reconciliation.

The placement policy is a product decision per node type and must be passed
through exactly as configured: ordinal assignment depends on it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Final

from castsync.domain.model import PlacementPolicy

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_DEBOUNCE_MS: Final[int] = 300


class UnknownNodeTypeError(KeyError):
    """Raised when no profile is registered for a node type."""


@dataclass(frozen=True, slots=True, kw_only=True)
class NodeTypeProfile:
    """How one node type pulls, merges and stores its entity list."""

    node_type: str
    input_port: str
    entities_field: str
    placement: PlacementPolicy
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    # snapshot flags forced while the input port has at least one connection
    connected_flags: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.debounce_ms < 0:
            raise ValueError("debounce_ms must be non-negative")
        if self.entities_field in self.connected_flags:
            raise ValueError("connected_flags must not overwrite the entities field")

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000

    def with_debounce(self, debounce_ms: int) -> NodeTypeProfile:
        return replace(self, debounce_ms=debounce_ms)


SCRIPT_ANALYZER: Final = NodeTypeProfile(
    node_type="script_analyzer",
    input_port="script",
    entities_field="characters",
    placement=PlacementPolicy.MANUAL_BEFORE_LINKED,
    debounce_ms=100,
)

SCRIPT_GENERATOR: Final = NodeTypeProfile(
    node_type="script_generator",
    input_port="characters",
    entities_field="detailedCharacters",
    placement=PlacementPolicy.LINKED_BEFORE_MANUAL,
    debounce_ms=800,
    connected_flags={"useExistingCharacters": True, "noCharacters": False},
)

BUILTIN_PROFILES: Final[dict[str, NodeTypeProfile]] = {
    profile.node_type: profile for profile in (SCRIPT_ANALYZER, SCRIPT_GENERATOR)
}


def profile_for(
    node_type: str,
    profiles: Mapping[str, NodeTypeProfile] = BUILTIN_PROFILES,
) -> NodeTypeProfile:
    try:
        return profiles[node_type]
    except KeyError:
        raise UnknownNodeTypeError(node_type) from None
