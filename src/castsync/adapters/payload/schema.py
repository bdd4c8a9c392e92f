"""Pydantic models and shape classification for entity payloads.

Upstream nodes publish entities in one of three shapes. ``classify_payload``
resolves a payload to exactly one of them, or to ``None`` for anything else.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import Final, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator

ENTITY_LIST_KEYS: Final[tuple[str, ...]] = ("entities", "detailedCharacters", "characters")

log = getLogger(__name__)


class PayloadShape(StrEnum):
    RECORD_SEQUENCE = "record_sequence"
    KEYED_DOCUMENT = "keyed_document"
    SINGLE_RECORD = "single_record"


@dataclass(frozen=True, slots=True)
class ClassifiedPayload:
    shape: PayloadShape
    records: tuple[Mapping[str, object], ...]


def _scalar_to_text(value: object) -> object:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return str(value)
    if isinstance(value, str):
        return value if value.strip() else None
    return None


def _truthy(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in {"", "false", "0"}
    return bool(value)


class EntityPayloadBase(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class EntityRecord(EntityPayloadBase):
    """One entity as published upstream or stored in a snapshot.

    Legacy spellings are accepted: ``prompt`` for ``imagePrompt``,
    ``description`` for ``fullDescription`` and ``alias`` for ``index``.
    """

    id: str | None = None
    name: str | None = None
    index: str | None = None
    alias: str | None = None
    prompt: str | None = None
    image_prompt: str | None = Field(default=None, alias="imagePrompt")
    full_description: str | None = Field(default=None, alias="fullDescription")
    description: str | None = None
    is_linked: bool = Field(default=False, alias="isLinked")

    _normalize_text = field_validator(
        "id",
        "name",
        "index",
        "alias",
        "prompt",
        "image_prompt",
        "full_description",
        "description",
        mode="before",
    )(_scalar_to_text)

    @field_validator("is_linked", mode="before")
    @classmethod
    def _parse_flag(cls, value: object) -> bool:
        return _truthy(value)

    @property
    def ordinal_hint(self) -> str | None:
        return self.index or self.alias

    @property
    def visual_prompt(self) -> str:
        return self.prompt or self.image_prompt or ""

    @property
    def description_text(self) -> str:
        return self.full_description or self.description or ""

    @property
    def passthrough(self) -> dict[str, object]:
        return dict(self.model_extra or {})


class StoredEntityDocument(EntityPayloadBase):
    """Canonical form written back into a node snapshot."""

    id: str
    name: str
    index: str
    is_linked: bool = Field(alias="isLinked")
    image_prompt: str = Field(default="", alias="imagePrompt")
    full_description: str = Field(default="", alias="fullDescription")


def decode_payload_text(payload: object) -> object | None:
    """Decode JSON text payloads; other values pass through unchanged."""

    if isinstance(payload, bytes | bytearray):
        try:
            payload = payload.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if isinstance(payload, str):
        if not payload.strip():
            return None
        try:
            return json.loads(payload)
        except (json.JSONDecodeError, RecursionError) as exc:
            log.debug("Undecodable JSON payload: %s", type(exc).__name__)
            return None
    return payload


def classify_payload(payload: object) -> ClassifiedPayload | None:
    value = decode_payload_text(payload)
    if isinstance(value, list | tuple):
        return ClassifiedPayload(PayloadShape.RECORD_SEQUENCE, _records(value))
    if isinstance(value, Mapping):
        document = cast(Mapping[str, object], value)
        for key in ENTITY_LIST_KEYS:
            candidate = document.get(key)
            if isinstance(candidate, list | tuple):
                return ClassifiedPayload(PayloadShape.KEYED_DOCUMENT, _records(candidate))
        name = document.get("name")
        if isinstance(name, str) and name.strip():
            return ClassifiedPayload(PayloadShape.SINGLE_RECORD, (document,))
    return None


def _records(values: list[object] | tuple[object, ...]) -> tuple[Mapping[str, object], ...]:
    return tuple(
        cast(Mapping[str, object], value) for value in values if isinstance(value, Mapping)
    )
