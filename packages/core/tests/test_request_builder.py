"""Tests for request assembly."""

import json

from gemini_chat_core.core.request_builder import (
    build_request,
    normalize_function_declarations,
)
from gemini_chat_core.core.types import Content

WEATHER_DECLARATION = {
    "name": "lookup_weather",
    "description": "Current temperature for a city",
    "parameters": {
        "type": "object",
        "properties": {"city": {"type": "string"}},
    },
}


def test_minimal_request():
    conversation = [Content.user("Hi")]
    body = json.loads(build_request(conversation, "Be brief.").to_body())

    assert body["system_instruction"] == {"parts": [{"text": "Be brief."}]}
    assert body["contents"] == [{"role": "user", "parts": [{"text": "Hi"}]}]
    assert body["generation_config"] == {
        "thinking_config": {"thinking_budget": -1, "include_thoughts": True}
    }
    assert "tools" not in body


def test_json_schema_sets_mime_type():
    schema = {"type": "object", "properties": {"answer": {"type": "string"}}}
    request = build_request([Content.user("Hi")], "sys", json_schema=schema)

    config = request.generation_config
    assert config.response_mime_type == "application/json"
    assert config.response_schema == schema


def test_declaration_list_becomes_single_tool():
    request = build_request(
        [Content.user("Hi")], "sys", function_declarations=[WEATHER_DECLARATION]
    )
    assert len(request.tools) == 1
    assert request.tools[0].function_declarations == [WEATHER_DECLARATION]


def test_wrapped_declarations_are_unwrapped():
    assert normalize_function_declarations(
        {"functions": [WEATHER_DECLARATION]}
    ) == [WEATHER_DECLARATION]
    assert normalize_function_declarations(
        {"function_declarations": [WEATHER_DECLARATION]}
    ) == [WEATHER_DECLARATION]
    assert normalize_function_declarations(WEATHER_DECLARATION) == [
        WEATHER_DECLARATION
    ]
    assert normalize_function_declarations(None) is None


def test_conversation_is_not_mutated():
    conversation = [Content.user("Hi")]
    request = build_request(conversation, "sys")
    request.contents[0].parts[0].text = "changed"

    assert conversation[0].parts[0].text == "Hi"
