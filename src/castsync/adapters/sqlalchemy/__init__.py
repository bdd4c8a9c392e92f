"""SQLAlchemy adapter package for castsync."""

from __future__ import annotations

from .mappings import create_all_tables, metadata, node_snapshot_table, port_connection_table
from .repositories import SqlAlchemyNodeGraph
from .unit_of_work import SqlAlchemyUnitOfWork, StartupError, shutdown, startup

__all__ = [
    "SqlAlchemyNodeGraph",
    "SqlAlchemyUnitOfWork",
    "StartupError",
    "create_all_tables",
    "metadata",
    "node_snapshot_table",
    "port_connection_table",
    "shutdown",
    "startup",
]
