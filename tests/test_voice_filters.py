"""Voice request to filter translation tests."""

from __future__ import annotations

import json

import pytest

from conftest import FakeTextModel
from models.product import ActiveFilters
from tools.gemini import extract_json_object
from tools.voice_filters import (
    FALLBACK_RESPONSE,
    VoiceFilterParser,
    VoiceFilters,
    mentions_clothing_type,
    on_transcription,
)

RED_PANTS = json.dumps(
    {
        "color": "Red",
        "type": "pants",
        "priceMin": None,
        "priceMax": None,
        "store": None,
        "inStockMin": None,
        "material": None,
        "occasion": None,
        "season": None,
    }
)


def test_extract_json_object_handles_fences_and_chatter() -> None:
    assert extract_json_object('```json\n{"color": "Red"}\n```') == {"color": "Red"}
    assert extract_json_object('Sure! {"a": {"b": 1}} hope that helps') == {"a": {"b": 1}}
    with pytest.raises(json.JSONDecodeError):
        extract_json_object("no braces here")


def test_parse_uses_latest_turn() -> None:
    model = FakeTextModel([RED_PANTS])
    filters = VoiceFilterParser(model).parse(["show me shirts", "Show me red pants"])
    assert filters.color == "Red"
    assert filters.type == "pants"
    assert model.prompts[0].endswith("USER REQUEST: Show me red pants")


@pytest.mark.parametrize(
    "model, turns",
    [
        (FakeTextModel([RED_PANTS]), []),
        (None, ["red pants"]),
        (FakeTextModel(error=RuntimeError("quota")), ["red pants"]),
        (FakeTextModel(["I cannot help with that"]), ["red pants"]),
        (FakeTextModel(['{"priceMin": "cheap"}']), ["something cheap"]),
        (FakeTextModel(['{"color": "Blue", "type": null}']), ["blue jeans please"]),
    ],
)
def test_parse_returns_none_when_unusable(model, turns) -> None:
    assert VoiceFilterParser(model).parse(turns) is None


def test_clothing_type_detection() -> None:
    assert mentions_clothing_type("Find me some Trousers")
    assert not mentions_clothing_type("anything under fifty dollars")


def test_on_transcription_summarises_filters() -> None:
    reply = on_transcription(VoiceFilterParser(FakeTextModel([RED_PANTS])), "Show me red pants")
    assert reply["response"] == "Setting filters: color: Red, type: pants"
    assert reply["should_continue"] is True
    assert reply["filters"].type == "pants"


def test_on_transcription_falls_back() -> None:
    reply = on_transcription(VoiceFilterParser(None), "hello there")
    assert reply == {"response": FALLBACK_RESPONSE, "should_continue": True, "filters": None}


def test_merge_into_active_filters() -> None:
    base = ActiveFilters(colors=["Blue"], types=["sweater"], price_max=80)
    merged = VoiceFilters.model_validate(
        {"color": "Any Color", "type": "pants", "priceMin": 10, "inStockMin": 1}
    ).to_active_filters(base)
    assert merged.colors == []
    assert merged.types == ["pants"]
    assert merged.price_min == 10
    assert merged.price_max == 80
    assert merged.in_stock is True
    assert base.colors == ["Blue"]
