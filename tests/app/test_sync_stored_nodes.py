from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from castsync.app import load_profiles, sync_stored_nodes
from castsync.config import SyncConfig
from castsync.domain.reconciliation import BUILTIN_PROFILES
from tests.support.entities import stored

if TYPE_CHECKING:
    from collections.abc import Callable

    from castsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork


@pytest.fixture
def seeded(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
) -> Callable[[], SqlAlchemyUnitOfWork]:
    with sqlite_unit_of_work() as uow:
        uow.graph.save_node(
            "A",
            node_type="script_analyzer",
            document={"characters": [stored("Fox"), stored("fox", identity="fox-2")]},
        )
        uow.graph.save_node("G", node_type="script_generator", document={"title": "Act I"})
        uow.graph.save_node("X", node_type="storyboard", document={})
        uow.graph.connect("A", "characters", "G", "characters")
        uow.commit()
    return sqlite_unit_of_work


def test_sync_stored_nodes_runs_until_settled(
    seeded: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    result = sync_stored_nodes(unit_of_work_factory=seeded, profiles=BUILTIN_PROFILES)

    assert result.converged
    assert result.rounds == 2
    assert result.commits == 2
    assert result.passes == 4
    assert result.skipped == ("X",)
    assert result.duplicates["A"] == ("Fox", "fox")

    with seeded() as uow:
        generator = uow.graph.read_snapshot("G")
    assert generator["title"] == "Act I"
    assert generator["useExistingCharacters"] is True
    detailed = generator["detailedCharacters"]
    assert isinstance(detailed, list)
    assert [(item["name"], item["index"], item["isLinked"]) for item in detailed] == [
        ("Fox", "Entity-1", True),
        ("fox", "Entity-2", True),
    ]


def test_sync_stored_nodes_limits_to_requested_nodes(
    seeded: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    result = sync_stored_nodes(
        node_ids=["A", "ghost"], unit_of_work_factory=seeded, profiles=BUILTIN_PROFILES
    )

    assert result.skipped == ("ghost",)
    assert result.passes == 2
    with seeded() as uow:
        assert "detailedCharacters" not in uow.graph.read_snapshot("G")


def test_sync_stored_nodes_reports_unsettled_chain(
    seeded: Callable[[], SqlAlchemyUnitOfWork],
) -> None:
    result = sync_stored_nodes(
        unit_of_work_factory=seeded, profiles=BUILTIN_PROFILES, max_rounds=1
    )

    assert not result.converged
    assert result.rounds == 1


def test_sync_stored_nodes_rejects_zero_rounds() -> None:
    with pytest.raises(ValueError, match="max_rounds"):
        sync_stored_nodes(max_rounds=0)


def test_load_profiles_applies_debounce_overrides() -> None:
    profiles = load_profiles(
        config=SyncConfig(default_debounce_ms=50, debounce_ms_by_node_type={"script_generator": 5})
    )

    assert profiles["script_analyzer"].debounce_ms == 50
    assert profiles["script_generator"].debounce_ms == 5
    assert BUILTIN_PROFILES["script_generator"].debounce_ms == 800
