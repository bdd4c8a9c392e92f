"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from castsync.adapters.payload import DocumentEntityCodec, extract_linked_entities
from castsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from castsync.config import get_sync_config
from castsync.domain.ports import GraphLinkResolver, SnapshotStore
from castsync.domain.reconciliation import (
    BUILTIN_PROFILES,
    EntitySyncCoordinator,
    ReconciliationEngine,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from castsync.config import SyncConfig
    from castsync.domain.ports import Scheduler
    from castsync.domain.reconciliation import NodeTypeProfile, ReconciliationResult

UnitOfWorkFactory = Callable[[], SqlAlchemyUnitOfWork]

DEFAULT_MAX_ROUNDS = 10

log = getLogger(__name__)


class NodeGraph(GraphLinkResolver, SnapshotStore, Protocol):
    """A host graph that both resolves links and stores snapshots."""


def load_profiles(
    *,
    config: SyncConfig | None = None,
    profiles: Mapping[str, NodeTypeProfile] = BUILTIN_PROFILES,
) -> dict[str, NodeTypeProfile]:
    """Return ``profiles`` with debounce overrides from the environment applied."""

    sync_config = config or get_sync_config(profiles)
    return {node_type: sync_config.apply(profile) for node_type, profile in profiles.items()}


def build_engine(graph: NodeGraph) -> ReconciliationEngine:
    return ReconciliationEngine(
        resolver=graph,
        store=graph,
        extract=extract_linked_entities,
        codec=DocumentEntityCodec(),
    )


def create_coordinator(graph: NodeGraph, scheduler: Scheduler) -> EntitySyncCoordinator:
    """Wire a coordinator for an interactive host (``scheduler`` is usually the event loop)."""

    return EntitySyncCoordinator(engine=build_engine(graph), scheduler=scheduler)


@dataclass(slots=True)
class SyncStoredNodesResult:
    """Outcome of reconciling stored nodes until no pass commits."""

    passes: int = 0
    commits: int = 0
    rounds: int = 0
    converged: bool = False
    skipped: tuple[str, ...] = ()
    duplicates: dict[str, tuple[str, ...]] = field(default_factory=dict[str, tuple[str, ...]])


def sync_stored_nodes(
    *,
    node_ids: Iterable[str] | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    profiles: Mapping[str, NodeTypeProfile] | None = None,
    max_rounds: int = DEFAULT_MAX_ROUNDS,
) -> SyncStoredNodesResult:
    """Reconcile stored nodes in rounds; a chain settles once a round commits nothing."""

    if max_rounds < 1:
        raise ValueError("max_rounds must be at least 1")
    if unit_of_work_factory is None:
        if not is_started():
            startup()
        unit_of_work_factory = SqlAlchemyUnitOfWork
    active_profiles = profiles if profiles is not None else load_profiles()

    result = SyncStoredNodesResult()
    latest: dict[str, ReconciliationResult] = {}
    with unit_of_work_factory() as uow:
        engine = build_engine(uow.graph)
        targets, skipped = _select_nodes(uow.graph.node_types(), active_profiles, node_ids)
        result.skipped = skipped
        for node_id in skipped:
            log.warning("Skipping node_id=%s: no profile for its node type", node_id)

        while result.rounds < max_rounds:
            result.rounds += 1
            round_commits = 0
            for node_id, profile in targets:
                pass_result = engine.run_pass(node_id, profile)
                latest[node_id] = pass_result
                result.passes += 1
                round_commits += int(pass_result.committed)
            result.commits += round_commits
            if round_commits == 0:
                result.converged = True
                break
        uow.commit()

    if not result.converged:
        log.warning("Stored nodes still changing after %d rounds", result.rounds)
    result.duplicates = {
        node_id: tuple(
            pass_result.entities[position].display_name
            for position in sorted(pass_result.duplicates.flagged_positions)
        )
        for node_id, pass_result in latest.items()
        if pass_result.duplicates.has_duplicates
    }
    return result


def _select_nodes(
    node_types: Mapping[str, str | None],
    profiles: Mapping[str, NodeTypeProfile],
    node_ids: Iterable[str] | None,
) -> tuple[list[tuple[str, NodeTypeProfile]], tuple[str, ...]]:
    requested = list(node_types) if node_ids is None else list(node_ids)
    targets: list[tuple[str, NodeTypeProfile]] = []
    skipped: list[str] = []
    for node_id in requested:
        node_type = node_types.get(node_id)
        profile = profiles.get(node_type) if node_type is not None else None
        if profile is None:
            skipped.append(node_id)
            continue
        targets.append((node_id, profile))
    return targets, tuple(skipped)
