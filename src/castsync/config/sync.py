"""Debounce configuration for reconciliation triggers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from .env import optional_env_int

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from castsync.domain.reconciliation import NodeTypeProfile

DEBOUNCE_ENV_VAR: Final[str] = "CASTSYNC_DEBOUNCE_MS"


@dataclass(frozen=True, slots=True)
class SyncConfig:
    """Debounce overrides in milliseconds; ``None`` keeps the profile's own delay."""

    default_debounce_ms: int | None = None
    debounce_ms_by_node_type: Mapping[str, int] = field(default_factory=dict[str, int])

    def debounce_ms_for(self, profile: NodeTypeProfile) -> int:
        override = self.debounce_ms_by_node_type.get(profile.node_type)
        if override is not None:
            return override
        if self.default_debounce_ms is not None:
            return self.default_debounce_ms
        return profile.debounce_ms

    def apply(self, profile: NodeTypeProfile) -> NodeTypeProfile:
        return profile.with_debounce(self.debounce_ms_for(profile))


def node_type_env_var(node_type: str) -> str:
    return f"{DEBOUNCE_ENV_VAR}_{node_type.upper()}"


def get_sync_config(node_types: Iterable[str]) -> SyncConfig:
    """Read ``CASTSYNC_DEBOUNCE_MS`` and ``CASTSYNC_DEBOUNCE_MS_<NODE_TYPE>``."""

    per_type: dict[str, int] = {}
    for node_type in node_types:
        value = optional_env_int(node_type_env_var(node_type), minimum=0)
        if value is not None:
            per_type[node_type] = value
    return SyncConfig(
        default_debounce_ms=optional_env_int(DEBOUNCE_ENV_VAR, minimum=0),
        debounce_ms_by_node_type=per_type,
    )
