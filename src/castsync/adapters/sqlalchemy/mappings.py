"""SQLAlchemy table metadata for node snapshots and port connections."""

from __future__ import annotations

import json
import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class JsonDocumentType(TypeDecorator[dict[str, object]]):
    """Snapshot documents stored as JSON text; anything but an object reads back empty."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: dict[str, object] | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps(value, ensure_ascii=False)

    def process_result_value(self, value: str | None, dialect: Dialect) -> dict[str, object]:
        _ = dialect
        if value is None:
            return {}
        loaded = json.loads(value)
        if not isinstance(loaded, dict):
            return {}
        return cast(dict[str, Any], loaded)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "pk": "pk_%(table_name)s",
    }
)

node_snapshot_table = Table(
    "node_snapshot",
    metadata,
    Column("node_id", String, primary_key=True),
    Column("node_type", String, nullable=True),
    Column("document", JsonDocumentType(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
)

port_connection_table = Table(
    "port_connection",
    metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("source_node_id", String, nullable=False),
    Column("source_port", String, nullable=False),
    Column("target_node_id", String, nullable=False),
    Column("target_port", String, nullable=False),
    # declaration order of fan-in connections on one target port
    Column("position", Integer, nullable=False),
    UniqueConstraint("source_node_id", "source_port", "target_node_id", "target_port"),
    Index("ix_port_connection_target", "target_node_id", "target_port"),
)


def create_all_tables(engine: Engine) -> None:
    metadata.create_all(engine, checkfirst=True)
