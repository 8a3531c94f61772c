from __future__ import annotations

import json

import pytest

from errors import ParseError
from response_parser import parse_model_json, unwrap_fences


def test_json_fence_followed_by_prose_extracts_block():
    block = '{"resourceType": "Condition", "code": {"text": "Headache"}}'
    text = f"Sure, here it is:\n```json\n{block}\n```\nHope this helps. ``` stray"
    unwrapped = unwrap_fences(text)
    assert unwrapped.fenced is True
    assert unwrapped.payload == block
    assert parse_model_json(text) == json.loads(block)


def test_unfenced_text_is_whole_payload():
    text = '  {"resourceType": "Questionnaire", "item": []}\n'
    unwrapped = unwrap_fences(text)
    assert unwrapped.fenced is False
    assert unwrapped.payload == text.strip()
    assert parse_model_json(text)["resourceType"] == "Questionnaire"


def test_generic_fence_used_when_no_json_tag():
    text = 'Result:\n```\n{"a": 1}\n```\nand then\n```\n{"b": 2}\n```'
    assert parse_model_json(text) == {"a": 1}


def test_generic_fence_drops_language_tag():
    text = '```javascript\n{"a": [1, 2]}\n```'
    assert parse_model_json(text) == {"a": [1, 2]}


def test_json_fence_preferred_over_earlier_generic_fence():
    text = 'Example:\n```\nnot json\n```\nActual:\n```json\n{"ok": true}\n```'
    assert parse_model_json(text) == {"ok": True}


def test_json_tag_is_case_insensitive():
    assert parse_model_json('```JSON\n{"x": 1}\n```') == {"x": 1}


def test_unclosed_json_fence_uses_rest_of_text():
    assert parse_model_json('```json\n{"x": 1}\n') == {"x": 1}


def test_bare_literal_in_generic_fence_is_not_mistaken_for_a_tag():
    assert parse_model_json("```null\n```") is None


@pytest.mark.parametrize(
    "text",
    [
        "I could not produce a FHIR resource from this conversation.",
        '```json\n{"resourceType": "Condition",}\n```',
        "```\n```",
        "",
    ],
)
def test_malformed_replies_raise_parse_error(text):
    with pytest.raises(ParseError) as excinfo:
        parse_model_json(text)
    assert excinfo.value.raw_text == text
