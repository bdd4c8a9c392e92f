"""Translate entity payloads and snapshot lists into domain entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, cast
from uuid import uuid4

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from castsync.domain.model import (
    PLACEHOLDER_NAME,
    Entity,
    EntityOrigin,
    new_identity,
)

from .schema import EntityRecord, StoredEntityDocument, classify_payload

if TYPE_CHECKING:
    from collections.abc import Iterable

log = getLogger(__name__)


def extract_linked_entities(payload: object | None, *, source_node_id: str) -> tuple[Entity, ...]:
    """Parse an upstream payload into linked entities.

    Unrecognised or malformed payloads yield no entities; records without a
    name get a placeholder name and are still returned.
    """

    if payload is None:
        return ()
    classified = classify_payload(payload)
    if classified is None:
        log.debug("Unrecognised payload from node_id=%s; no linked entities", source_node_id)
        return ()

    entities: list[Entity] = []
    for record in _validated(classified.records, source_node_id):
        entities.append(
            _to_entity(
                record,
                identity=_linked_identity(record, source_node_id),
                origin=EntityOrigin.LINKED,
            )
        )
    return tuple(entities)


def _linked_identity(record: EntityRecord, source_node_id: str) -> str:
    if record.id:
        return record.id
    key = record.ordinal_hint or record.name
    if key:
        return f"linked-{source_node_id}-{key}"
    return f"linked-{source_node_id}-{uuid4().hex}"


def _validated(
    records: Iterable[Mapping[str, object]],
    source: str,
) -> Iterable[EntityRecord]:
    for raw in records:
        try:
            record = EntityRecord.model_validate(dict(raw))
        except ValidationError:
            log.debug("Skipping malformed entity record from %s", source, exc_info=True)
            continue
        if record.name is None:
            log.debug("Entity record from %s has no name; using placeholder", source)
        yield record


def _to_entity(record: EntityRecord, *, identity: str, origin: EntityOrigin) -> Entity:
    return Entity(
        identity=identity,
        display_name=record.name or PLACEHOLDER_NAME,
        ordinal=record.ordinal_hint or "",
        origin=origin,
        visual_prompt=record.visual_prompt,
        full_description=record.description_text,
        passthrough=_json_safe(record.passthrough),
    )


def _json_safe(extra: Mapping[str, object]) -> dict[str, object]:
    """Keep only passthrough values that survive a JSON snapshot; drop the rest."""

    safe: dict[str, object] = {}
    for key, value in extra.items():
        try:
            safe[key] = to_jsonable_python(value)
        except (PydanticSerializationError, ValueError, RecursionError):
            log.debug("Dropping non-JSON passthrough key %r", key)
    return safe


@dataclass(frozen=True, slots=True)
class DocumentEntityCodec:
    """Snapshot codec: ``{"id", "name", "index", "isLinked", ...}`` documents."""

    def decode_entities(self, value: object) -> tuple[Entity, ...]:
        if not isinstance(value, list | tuple):
            if value is not None:
                log.debug("Ignoring non-list entity field of type %s", type(value).__name__)
            return ()

        records = [
            cast(Mapping[str, object], item) for item in value if isinstance(item, Mapping)
        ]
        return tuple(
            _to_entity(
                record,
                identity=record.id or new_identity(),
                origin=EntityOrigin.LINKED if record.is_linked else EntityOrigin.MANUAL,
            )
            for record in _validated(records, "snapshot")
        )

    def encode_entities(self, entities: tuple[Entity, ...]) -> list[dict[str, object]]:
        return [self._encode(entity) for entity in entities]

    def _encode(self, entity: Entity) -> dict[str, object]:
        fields: dict[str, object] = dict(entity.passthrough)
        fields.update(
            {
                "id": entity.identity,
                "name": entity.display_name,
                "index": entity.ordinal,
                "isLinked": entity.is_linked,
                "imagePrompt": entity.visual_prompt,
                "fullDescription": entity.full_description,
            }
        )
        document = StoredEntityDocument.model_validate(fields)
        return document.model_dump(mode="json", by_alias=True)
