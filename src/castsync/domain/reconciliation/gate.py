"""Change gate: the only place a reconciliation pass writes to a snapshot.

A commit is what wakes downstream nodes, so suppressing equal writes is what
stops a recomputed-but-unchanged list from re-entering reconciliation forever.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from castsync.domain.ports import SnapshotDocument, SnapshotStore

    from .profiles import NodeTypeProfile

log = logging.getLogger(__name__)


class GateDecision(StrEnum):
    COMMIT = "commit"
    NOOP = "noop"


@dataclass(frozen=True, slots=True)
class GateOutcome:
    decision: GateDecision
    document: SnapshotDocument

    @property
    def committed(self) -> bool:
        return self.decision is GateDecision.COMMIT


def propose_snapshot(
    current: Mapping[str, object],
    *,
    profile: NodeTypeProfile,
    encoded_entities: list[dict[str, object]],
    connected: bool,
) -> SnapshotDocument:
    """Return a copy of ``current`` carrying the new entity list and forced flags."""

    proposed: SnapshotDocument = dict(current)
    proposed[profile.entities_field] = encoded_entities
    if connected:
        proposed.update(profile.connected_flags)
    return proposed


@dataclass(slots=True)
class ChangeGate:
    """Commit ``proposed`` only when it differs structurally from ``current``."""

    store: SnapshotStore

    def __call__(
        self,
        node_id: str,
        *,
        current: Mapping[str, object],
        proposed: SnapshotDocument,
    ) -> GateOutcome:
        if proposed == current:
            log.debug("No snapshot change for node_id=%s", node_id)
            return GateOutcome(GateDecision.NOOP, dict(current))

        self.store.commit_snapshot(node_id, proposed)
        log.info("Committed snapshot for node_id=%s", node_id)
        return GateOutcome(GateDecision.COMMIT, proposed)
