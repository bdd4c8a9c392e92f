"""Orchestrator for one reconciliation pass.

The engine composes the extraction, merge, index, duplicate and gate stages
for a single node. It is synchronous and holds no per-node state: the set of
previously seen identities is passed in and handed back in the result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .duplicates import DuplicateReport, detect_duplicates
from .extract import gather_linked_entities
from .gate import ChangeGate, propose_snapshot
from .indexing import assign_ordinals
from .merge import reconcile_entities

if TYPE_CHECKING:
    from castsync.domain.model import Entity
    from castsync.domain.ports import EntityDocumentCodec, GraphLinkResolver, SnapshotStore

    from .extract import ExtractLinkedEntities
    from .profiles import NodeTypeProfile

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class ReconciliationResult:
    """Outcome of one pass, as consumed by panels and downstream prompt builders."""

    node_id: str
    entities: tuple[Entity, ...]
    duplicates: DuplicateReport
    committed: bool
    connected: bool
    seen_identities: frozenset[str]
    new_identities: frozenset[str]


@dataclass(slots=True)
class ReconciliationEngine:
    """Run extraction -> merge -> index -> duplicate check -> gated commit."""

    resolver: GraphLinkResolver
    store: SnapshotStore
    extract: ExtractLinkedEntities
    codec: EntityDocumentCodec

    def run_pass(
        self,
        node_id: str,
        profile: NodeTypeProfile,
        *,
        seen_identities: frozenset[str] = frozenset(),
    ) -> ReconciliationResult:
        snapshot = self.store.read_snapshot(node_id)
        previous = self.codec.decode_entities(snapshot.get(profile.entities_field))

        connections = self.resolver.connections_into(node_id, profile.input_port)
        connected = bool(connections)
        linked = gather_linked_entities(self.resolver, connections, extract=self.extract)

        merged = reconcile_entities(
            previous,
            linked,
            connected=connected,
            placement=profile.placement,
        )
        indexed = assign_ordinals(merged, profile.placement)
        duplicates = detect_duplicates(indexed)
        if duplicates.has_duplicates:
            log.debug(
                "Duplicate entities on node_id=%s at positions %s",
                node_id,
                sorted(duplicates.flagged_positions),
            )

        proposed = propose_snapshot(
            snapshot,
            profile=profile,
            encoded_entities=self.codec.encode_entities(indexed),
            connected=connected,
        )
        outcome = ChangeGate(self.store)(node_id, current=snapshot, proposed=proposed)

        identities = frozenset(entity.identity for entity in indexed)
        return ReconciliationResult(
            node_id=node_id,
            entities=indexed,
            duplicates=duplicates,
            committed=outcome.committed,
            connected=connected,
            seen_identities=seen_identities | identities,
            new_identities=identities - seen_identities,
        )

    def current_entities(self, node_id: str, profile: NodeTypeProfile) -> tuple[Entity, ...]:
        """Decode the entity list currently committed for ``node_id``."""

        snapshot = self.store.read_snapshot(node_id)
        return self.codec.decode_entities(snapshot.get(profile.entities_field))

    def commit_entities(
        self,
        node_id: str,
        profile: NodeTypeProfile,
        entities: tuple[Entity, ...],
    ) -> bool:
        """Write a user-edited list through the gate; return whether it changed."""

        snapshot = self.store.read_snapshot(node_id)
        proposed = propose_snapshot(
            snapshot,
            profile=profile,
            encoded_entities=self.codec.encode_entities(entities),
            connected=False,
        )
        return ChangeGate(self.store)(node_id, current=snapshot, proposed=proposed).committed
