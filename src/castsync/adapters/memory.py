"""In-memory node graph implementing the resolver and snapshot store ports."""

from __future__ import annotations

import copy
from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from castsync.domain.ports import PortConnection

if TYPE_CHECKING:
    from collections.abc import Mapping

    from castsync.domain.ports import SnapshotDocument


@dataclass(slots=True)
class InMemoryNodeGraph:
    """Snapshots and connections held in plain dictionaries.

    Upstream payloads default to the source node's whole snapshot; a specific
    output port can be overridden with ``set_output``. Documents are copied on
    the way in and out so callers never share mutable state with the store.
    """

    snapshots: dict[str, SnapshotDocument] = field(default_factory=dict[str, dict[str, object]])
    connections: list[PortConnection] = field(default_factory=list[PortConnection])
    outputs: dict[tuple[str, str], object] = field(default_factory=dict[tuple[str, str], object])
    commits: Counter[str] = field(default_factory=Counter[str])

    def add_node(self, node_id: str, document: Mapping[str, object] | None = None) -> None:
        self.snapshots[node_id] = copy.deepcopy(dict(document or {}))

    def connect(
        self,
        source_node_id: str,
        source_port: str,
        target_node_id: str,
        target_port: str,
    ) -> PortConnection:
        connection = PortConnection(
            source_node_id=source_node_id,
            source_port=source_port,
            target_node_id=target_node_id,
            target_port=target_port,
        )
        if connection not in self.connections:
            self.connections.append(connection)
        return connection

    def disconnect(self, connection: PortConnection) -> None:
        if connection in self.connections:
            self.connections.remove(connection)

    def set_output(self, node_id: str, port_id: str, payload: object) -> None:
        self.outputs[(node_id, port_id)] = payload

    def connections_into(self, node_id: str, port_id: str) -> tuple[PortConnection, ...]:
        return tuple(
            connection
            for connection in self.connections
            if connection.target_node_id == node_id and connection.target_port == port_id
        )

    def resolve_upstream_payload(self, node_id: str, port_id: str) -> object | None:
        if (node_id, port_id) in self.outputs:
            return copy.deepcopy(self.outputs[(node_id, port_id)])
        snapshot = self.snapshots.get(node_id)
        if snapshot is None:
            return None
        return copy.deepcopy(snapshot)

    def read_snapshot(self, node_id: str) -> SnapshotDocument:
        return copy.deepcopy(self.snapshots.get(node_id, {}))

    def commit_snapshot(self, node_id: str, document: SnapshotDocument) -> None:
        self.snapshots[node_id] = copy.deepcopy(document)
        self.commits[node_id] += 1
