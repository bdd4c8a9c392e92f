from __future__ import annotations

from castsync.adapters.memory import InMemoryNodeGraph
from castsync.domain.reconciliation import SCRIPT_ANALYZER, SCRIPT_GENERATOR, ChangeGate, GateDecision
from castsync.domain.reconciliation.gate import propose_snapshot
from tests.support.entities import stored


def test_propose_snapshot_forces_flags_only_while_connected() -> None:
    current = {"title": "Draft", "useExistingCharacters": False}
    encoded = [stored("Fox", index="Entity-1")]

    connected = propose_snapshot(
        current, profile=SCRIPT_GENERATOR, encoded_entities=encoded, connected=True
    )
    disconnected = propose_snapshot(
        current, profile=SCRIPT_GENERATOR, encoded_entities=encoded, connected=False
    )

    assert connected == {
        "title": "Draft",
        "useExistingCharacters": True,
        "noCharacters": False,
        "detailedCharacters": encoded,
    }
    assert disconnected == {
        "title": "Draft",
        "useExistingCharacters": False,
        "detailedCharacters": encoded,
    }
    assert "detailedCharacters" not in current


def test_gate_skips_equal_documents(graph: InMemoryNodeGraph) -> None:
    document = {"characters": [stored("Fox", index="Entity-1")]}
    graph.add_node("A", document)
    gate = ChangeGate(graph)

    proposed = propose_snapshot(
        document,
        profile=SCRIPT_ANALYZER,
        encoded_entities=[stored("Fox", index="Entity-1")],
        connected=False,
    )
    outcome = gate("A", current=document, proposed=proposed)

    assert outcome.decision is GateDecision.NOOP
    assert not outcome.committed
    assert graph.commits["A"] == 0


def test_gate_commits_field_level_changes(graph: InMemoryNodeGraph) -> None:
    document = {"characters": [stored("Fox", index="Entity-1")]}
    graph.add_node("A", document)
    gate = ChangeGate(graph)

    proposed = {"characters": [stored("Fox", index="Entity-1", imagePrompt="red fur")]}
    outcome = gate("A", current=document, proposed=proposed)

    assert outcome.committed
    assert graph.commits["A"] == 1
    assert graph.read_snapshot("A") == proposed
