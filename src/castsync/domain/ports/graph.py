"""Ports for reading the node graph around a node."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True, kw_only=True)
class PortConnection:
    """Directed link from an upstream output port to a downstream input port."""

    source_node_id: str
    source_port: str
    target_node_id: str
    target_port: str


@runtime_checkable
class GraphLinkResolver(Protocol):
    """Read-only view of connections and upstream payloads.

    Implementations must reflect the latest committed snapshot of every source
    node and return connections in declaration order.
    """

    def connections_into(self, node_id: str, port_id: str) -> tuple[PortConnection, ...]: ...

    def resolve_upstream_payload(self, node_id: str, port_id: str) -> object | None: ...
