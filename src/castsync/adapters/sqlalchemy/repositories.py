"""Node graph backed by a SQLAlchemy session."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import delete, func, insert, select, update

from castsync.adapters.sqlalchemy.mappings import node_snapshot_table, port_connection_table
from castsync.domain.ports import PortConnection

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy.orm import Session

    from castsync.domain.ports import SnapshotDocument


class SqlAlchemyNodeGraph:
    """Implements ``GraphLinkResolver`` and ``SnapshotStore`` on one session.

    Upstream payloads are the source node's stored snapshot; output ports are
    not distinguished at this layer.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    # snapshots ---------------------------------------------------------------

    def read_snapshot(self, node_id: str) -> SnapshotDocument:
        document = self._document(node_id)
        return document if document is not None else {}

    def commit_snapshot(self, node_id: str, document: SnapshotDocument) -> None:
        self._upsert(node_id, document=dict(document))

    def save_node(
        self,
        node_id: str,
        *,
        node_type: str | None,
        document: Mapping[str, object] | None = None,
    ) -> None:
        self._upsert(node_id, document=dict(document or {}), node_type=node_type)

    def node_types(self) -> dict[str, str | None]:
        stmt = select(node_snapshot_table.c.node_id, node_snapshot_table.c.node_type).order_by(
            node_snapshot_table.c.node_id
        )
        return {row.node_id: row.node_type for row in self.session.execute(stmt)}

    # connections -------------------------------------------------------------

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
        if connection in self.connections_into(target_node_id, target_port):
            return connection
        next_position = self.session.execute(
            select(func.coalesce(func.max(port_connection_table.c.position), -1) + 1)
            .where(port_connection_table.c.target_node_id == target_node_id)
            .where(port_connection_table.c.target_port == target_port)
        ).scalar_one()
        self.session.execute(
            insert(port_connection_table).values(
                source_node_id=source_node_id,
                source_port=source_port,
                target_node_id=target_node_id,
                target_port=target_port,
                position=next_position,
            )
        )
        return connection

    def disconnect(self, connection: PortConnection) -> None:
        self.session.execute(
            delete(port_connection_table)
            .where(port_connection_table.c.source_node_id == connection.source_node_id)
            .where(port_connection_table.c.source_port == connection.source_port)
            .where(port_connection_table.c.target_node_id == connection.target_node_id)
            .where(port_connection_table.c.target_port == connection.target_port)
        )

    def connections_into(self, node_id: str, port_id: str) -> tuple[PortConnection, ...]:
        stmt = (
            select(
                port_connection_table.c.source_node_id,
                port_connection_table.c.source_port,
            )
            .where(port_connection_table.c.target_node_id == node_id)
            .where(port_connection_table.c.target_port == port_id)
            .order_by(port_connection_table.c.position)
        )
        return tuple(
            PortConnection(
                source_node_id=row.source_node_id,
                source_port=row.source_port,
                target_node_id=node_id,
                target_port=port_id,
            )
            for row in self.session.execute(stmt)
        )

    def resolve_upstream_payload(self, node_id: str, port_id: str) -> object | None:
        _ = port_id
        return self._document(node_id)

    # helpers -----------------------------------------------------------------

    def _document(self, node_id: str) -> SnapshotDocument | None:
        stmt = select(node_snapshot_table.c.document).where(
            node_snapshot_table.c.node_id == node_id
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def _upsert(
        self,
        node_id: str,
        *,
        document: SnapshotDocument,
        node_type: str | None = None,
    ) -> None:
        now = datetime.now(UTC)
        exists = self.session.execute(
            select(node_snapshot_table.c.node_id).where(node_snapshot_table.c.node_id == node_id)
        ).scalar_one_or_none()
        if exists is None:
            self.session.execute(
                insert(node_snapshot_table).values(
                    node_id=node_id,
                    node_type=node_type,
                    document=document,
                    updated_at=now,
                )
            )
            return
        values: dict[str, object] = {"document": document, "updated_at": now}
        if node_type is not None:
            values["node_type"] = node_type
        self.session.execute(
            update(node_snapshot_table)
            .where(node_snapshot_table.c.node_id == node_id)
            .values(**values)
        )
