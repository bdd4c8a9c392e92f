"""Entity payload parsing for upstream ports and node snapshots."""

from __future__ import annotations

from .schema import (
    ENTITY_LIST_KEYS,
    ClassifiedPayload,
    EntityRecord,
    PayloadShape,
    StoredEntityDocument,
    classify_payload,
)
from .translator import DocumentEntityCodec, extract_linked_entities

__all__ = [
    "ENTITY_LIST_KEYS",
    "ClassifiedPayload",
    "DocumentEntityCodec",
    "EntityRecord",
    "PayloadShape",
    "StoredEntityDocument",
    "classify_payload",
    "extract_linked_entities",
]
