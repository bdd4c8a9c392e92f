"""Extraction stage: pull linked entities through a node's input connections.

Payload classification and record parsing live in the payload adapter; this
module only fixes the contract and the fan-in ordering.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable

    from castsync.domain.model import Entity
    from castsync.domain.ports import GraphLinkResolver, PortConnection

log = logging.getLogger(__name__)


class ExtractLinkedEntities(Protocol):
    """Parse one upstream payload into linked entities; never raises on bad input."""

    def __call__(self, payload: object | None, *, source_node_id: str) -> tuple[Entity, ...]: ...


def gather_linked_entities(
    resolver: GraphLinkResolver,
    connections: Iterable[PortConnection],
    *,
    extract: ExtractLinkedEntities,
) -> tuple[Entity, ...]:
    """Extract every connection independently and concatenate in connection order."""

    linked: list[Entity] = []
    for connection in connections:
        payload = resolver.resolve_upstream_payload(
            connection.source_node_id,
            connection.source_port,
        )
        batch = extract(payload, source_node_id=connection.source_node_id)
        log.debug(
            "Extracted %d linked entities from %s:%s",
            len(batch),
            connection.source_node_id,
            connection.source_port,
        )
        linked.extend(batch)
    return tuple(linked)
