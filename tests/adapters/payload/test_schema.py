from __future__ import annotations

import pytest

from castsync.adapters.payload import EntityRecord, PayloadShape, classify_payload
from castsync.adapters.payload.schema import decode_payload_text


@pytest.mark.parametrize(
    ("payload", "shape", "count"),
    [
        ([{"name": "Fox"}, "junk", {"name": "Wolf"}], PayloadShape.RECORD_SEQUENCE, 2),
        ({"detailedCharacters": [{"name": "Fox"}]}, PayloadShape.KEYED_DOCUMENT, 1),
        ({"name": "Fox", "prompt": "red"}, PayloadShape.SINGLE_RECORD, 1),
        ('{"characters": [{"name": "Fox"}, {"name": "Wolf"}]}', PayloadShape.KEYED_DOCUMENT, 2),
        (b'[{"name": "Fox"}]', PayloadShape.RECORD_SEQUENCE, 1),
    ],
)
def test_classify_known_shapes(payload: object, shape: PayloadShape, count: int) -> None:
    classified = classify_payload(payload)

    assert classified is not None
    assert classified.shape is shape
    assert len(classified.records) == count


@pytest.mark.parametrize(
    "payload",
    [None, "", "   ", "[{oops", {"title": "Act I"}, {"name": "   "}, 42, b"\xff\xfe"],
)
def test_unrecognised_payloads_classify_to_none(payload: object) -> None:
    assert classify_payload(payload) is None


def test_entities_key_wins_over_other_keys() -> None:
    classified = classify_payload(
        {"characters": [{"name": "B"}], "entities": [{"name": "A"}], "name": "Doc"}
    )

    assert classified is not None
    assert classified.records == ({"name": "A"},)


def test_decode_payload_text_passes_non_text_through() -> None:
    payload = {"name": "Fox"}

    assert decode_payload_text(payload) is payload
    assert decode_payload_text('"plain"') == "plain"


def test_entity_record_accepts_legacy_spellings() -> None:
    record = EntityRecord.model_validate(
        {
            "id": 7,
            "name": "Fox",
            "alias": "3",
            "prompt": "red fur",
            "description": "A clever fox.",
            "isLinked": "false",
            "mood": "sly",
        }
    )

    assert record.id == "7"
    assert record.ordinal_hint == "3"
    assert record.visual_prompt == "red fur"
    assert record.description_text == "A clever fox."
    assert record.is_linked is False
    assert record.passthrough == {"mood": "sly"}


def test_entity_record_blank_strings_become_none() -> None:
    record = EntityRecord.model_validate({"name": "  ", "index": "", "imagePrompt": None})

    assert record.name is None
    assert record.ordinal_hint is None
    assert record.visual_prompt == ""
