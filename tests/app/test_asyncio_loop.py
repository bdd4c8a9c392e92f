from __future__ import annotations

import asyncio

from castsync.adapters.memory import InMemoryNodeGraph
from castsync.app import create_coordinator
from castsync.domain.reconciliation import (
    SCRIPT_ANALYZER,
    SCRIPT_GENERATOR,
    ReconciliationResult,
    TriggerState,
)
from tests.support.entities import stored


def test_coordinator_runs_on_an_asyncio_event_loop() -> None:
    graph = InMemoryNodeGraph()
    graph.add_node("A", {"characters": [stored("Fox")]})
    graph.add_node("G", {})
    graph.connect("A", "characters", "G", "characters")

    async def scenario() -> ReconciliationResult | None:
        coordinator = create_coordinator(graph, asyncio.get_running_loop())
        coordinator.register("A", SCRIPT_ANALYZER.with_debounce(0))
        coordinator.register("G", SCRIPT_GENERATOR.with_debounce(10))
        for _ in range(100):
            await asyncio.sleep(0.01)
            if coordinator.trigger_for("G").passes:
                break
        assert coordinator.trigger_for("G").state is TriggerState.IDLE
        return coordinator.latest("G")

    result = asyncio.run(scenario())

    assert result is not None
    assert [entity.display_name for entity in result.entities] == ["Fox"]
    assert result.committed
