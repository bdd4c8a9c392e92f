"""Entity reconciliation core.

One pass for one node runs these stages in order:
1) extract linked entities from every input connection (fan-in in declaration order)
2) merge them with the node's manual entities per the node type's placement policy
3) sort inside origin blocks by legacy key and relabel ``Entity-1..n``
4) detect ordinal/name/identity collisions for panel warnings
5) commit through the change gate only when the snapshot really changes

``DebouncedTrigger`` and ``EntitySyncCoordinator`` decide *when* a pass runs.
"""

from __future__ import annotations

from .coordinator import EntitySyncCoordinator, UnregisteredNodeError
from .duplicates import DuplicateReport, detect_duplicates
from .editing import (
    UnknownEntityError,
    add_manual_entity,
    clear_manual_entities,
    embed_entity,
    move_entity,
    remove_entity,
    update_entity,
)
from .engine import ReconciliationEngine, ReconciliationResult
from .extract import ExtractLinkedEntities, gather_linked_entities
from .gate import ChangeGate, GateDecision, GateOutcome
from .indexing import MISSING_SORT_KEY, assign_ordinals, legacy_sort_key
from .merge import reconcile_entities
from .profiles import (
    BUILTIN_PROFILES,
    SCRIPT_ANALYZER,
    SCRIPT_GENERATOR,
    NodeTypeProfile,
    UnknownNodeTypeError,
    profile_for,
)
from .trigger import DebouncedTrigger, TriggerState

__all__ = [
    "BUILTIN_PROFILES",
    "MISSING_SORT_KEY",
    "SCRIPT_ANALYZER",
    "SCRIPT_GENERATOR",
    "ChangeGate",
    "DebouncedTrigger",
    "DuplicateReport",
    "EntitySyncCoordinator",
    "ExtractLinkedEntities",
    "GateDecision",
    "GateOutcome",
    "NodeTypeProfile",
    "ReconciliationEngine",
    "ReconciliationResult",
    "TriggerState",
    "UnknownEntityError",
    "UnknownNodeTypeError",
    "UnregisteredNodeError",
    "add_manual_entity",
    "assign_ordinals",
    "clear_manual_entities",
    "detect_duplicates",
    "embed_entity",
    "gather_linked_entities",
    "legacy_sort_key",
    "move_entity",
    "profile_for",
    "reconcile_entities",
    "remove_entity",
    "update_entity",
]
