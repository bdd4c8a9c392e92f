from __future__ import annotations

from castsync.domain.model import EntityOrigin, PlacementPolicy
from castsync.domain.reconciliation import reconcile_entities
from tests.support.entities import linked, manual, names


def test_previous_linked_entities_never_survive_on_their_own() -> None:
    previous = (manual("Wolf"), linked("Stale Fox"))

    merged = reconcile_entities(
        previous,
        (linked("Fox"),),
        connected=True,
        placement=PlacementPolicy.MANUAL_BEFORE_LINKED,
    )

    assert names(merged) == ["Wolf", "Fox"]


def test_disconnected_node_keeps_only_manual_entities() -> None:
    previous = (linked("Fox"), manual("Wolf"))

    merged = reconcile_entities(
        previous,
        (linked("Fox"),),
        connected=False,
        placement=PlacementPolicy.LINKED_BEFORE_MANUAL,
    )

    assert names(merged) == ["Wolf"]


def test_linked_before_manual_placement() -> None:
    merged = reconcile_entities(
        (manual("Wolf"), manual("Owl")),
        (linked("Fox"), linked("Bear")),
        connected=True,
        placement=PlacementPolicy.LINKED_BEFORE_MANUAL,
    )

    assert names(merged) == ["Fox", "Bear", "Wolf", "Owl"]


def test_fresh_batch_entities_are_marked_linked() -> None:
    merged = reconcile_entities(
        (),
        (manual("Fox"),),
        connected=True,
        placement=PlacementPolicy.MANUAL_BEFORE_LINKED,
    )

    assert [entity.origin for entity in merged] == [EntityOrigin.LINKED]
