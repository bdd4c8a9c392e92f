"""Ports the reconciliation engine consumes from its host."""

from __future__ import annotations

from .graph import GraphLinkResolver, PortConnection
from .scheduling import Scheduler
from .snapshots import EntityDocumentCodec, SnapshotDocument, SnapshotStore

__all__ = [
    "EntityDocumentCodec",
    "GraphLinkResolver",
    "PortConnection",
    "Scheduler",
    "SnapshotDocument",
    "SnapshotStore",
]
