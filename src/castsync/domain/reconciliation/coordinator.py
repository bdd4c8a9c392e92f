"""Route graph change notifications to per-node debounced reconciliation.

The coordinator runs on the host's single event loop. Any object with
``time()`` and ``call_at()`` (``asyncio`` event loops included) can schedule it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .trigger import DebouncedTrigger

if TYPE_CHECKING:
    from collections.abc import Callable

    from castsync.domain.model import Entity
    from castsync.domain.ports import Scheduler

    from .engine import ReconciliationEngine, ReconciliationResult
    from .profiles import NodeTypeProfile

type EntityEdit = Callable[[tuple[Entity, ...]], tuple[Entity, ...]]
type ResultListener = Callable[[ReconciliationResult], None]

log = logging.getLogger(__name__)


class UnregisteredNodeError(KeyError):
    """Raised when an operation targets a node the coordinator does not manage."""


@dataclass(slots=True)
class _Registration:
    profile: NodeTypeProfile
    trigger: DebouncedTrigger
    seen_identities: frozenset[str] = frozenset()
    latest: ReconciliationResult | None = None


@dataclass(slots=True)
class EntitySyncCoordinator:
    """Own one trigger per registered node and propagate commits downstream."""

    engine: ReconciliationEngine
    scheduler: Scheduler
    _nodes: dict[str, _Registration] = field(default_factory=dict[str, _Registration])
    _listeners: list[ResultListener] = field(default_factory=list[ResultListener])

    def register(self, node_id: str, profile: NodeTypeProfile) -> DebouncedTrigger:
        trigger = DebouncedTrigger(
            self.scheduler,
            delay=profile.debounce_seconds,
            action=lambda: self._on_deadline(node_id),
            name=f"{profile.node_type}:{node_id}",
        )
        self._nodes[node_id] = _Registration(profile=profile, trigger=trigger)
        trigger.notify()
        return trigger

    def unregister(self, node_id: str) -> None:
        self._nodes.pop(node_id, None)

    def subscribe(self, listener: ResultListener) -> None:
        self._listeners.append(listener)

    def is_registered(self, node_id: str) -> bool:
        return node_id in self._nodes

    def trigger_for(self, node_id: str) -> DebouncedTrigger:
        return self._require(node_id).trigger

    def latest(self, node_id: str) -> ReconciliationResult | None:
        return self._require(node_id).latest

    def snapshot_committed(self, node_id: str) -> None:
        """Wake every registered node fed by ``node_id``."""

        resolver = self.engine.resolver
        for target_id, registration in self._nodes.items():
            connections = resolver.connections_into(target_id, registration.profile.input_port)
            if any(connection.source_node_id == node_id for connection in connections):
                registration.trigger.notify()

    def connections_changed(self, node_id: str) -> None:
        self._require(node_id).trigger.notify()

    def refresh(self, node_id: str) -> ReconciliationResult:
        """Reconcile now, consuming any pending debounced pass."""

        registration = self._require(node_id)
        if registration.trigger.flush() and registration.latest is not None:
            return registration.latest
        return self._reconcile(node_id)

    def apply_edit(self, node_id: str, edit: EntityEdit) -> ReconciliationResult:
        """Commit a panel edit, then re-index immediately."""

        registration = self._require(node_id)
        current = self.engine.current_entities(node_id, registration.profile)
        edited = edit(current)
        edit_committed = self.engine.commit_entities(node_id, registration.profile, edited)
        result = self._reconcile(node_id)
        if edit_committed and not result.committed:
            self.snapshot_committed(node_id)
        return result

    def _on_deadline(self, node_id: str) -> None:
        # a timer armed before unregister may still fire
        if node_id in self._nodes:
            self._reconcile(node_id)

    def _reconcile(self, node_id: str) -> ReconciliationResult:
        registration = self._require(node_id)
        result = self.engine.run_pass(
            node_id,
            registration.profile,
            seen_identities=registration.seen_identities,
        )
        registration.seen_identities = result.seen_identities
        registration.latest = result
        if result.new_identities:
            log.debug("New entities on node_id=%s: %s", node_id, sorted(result.new_identities))
        for listener in self._listeners:
            listener(result)
        if result.committed:
            self.snapshot_committed(node_id)
        return result

    def _require(self, node_id: str) -> _Registration:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise UnregisteredNodeError(node_id) from None
