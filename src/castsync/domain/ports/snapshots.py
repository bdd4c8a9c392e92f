"""Ports for node snapshot persistence and entity (de)serialisation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from castsync.domain.model import Entity

type SnapshotDocument = dict[str, object]


@runtime_checkable
class SnapshotStore(Protocol):
    """Owner-only storage for node snapshots.

    ``commit_snapshot`` must tolerate redundant writes of an unchanged document.
    """

    def read_snapshot(self, node_id: str) -> SnapshotDocument: ...

    def commit_snapshot(self, node_id: str, document: SnapshotDocument) -> None: ...


@runtime_checkable
class EntityDocumentCodec(Protocol):
    """Translate between stored entity documents and domain entities."""

    def decode_entities(self, value: object) -> tuple[Entity, ...]: ...

    def encode_entities(self, entities: tuple[Entity, ...]) -> list[dict[str, object]]: ...
