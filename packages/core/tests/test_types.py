"""Tests for the wire content model."""

import json

from gemini_chat_core.core.types import (
    Content,
    FunctionCall,
    GenerateContentRequest,
    Part,
    PartKind,
)


class TestPart:
    def test_accepts_camel_case_keys(self):
        part = Part.model_validate(
            {"functionCall": {"name": "lookup_weather", "args": {"city": "Oslo"}}}
        )
        assert part.kind == PartKind.FUNCTION_CALL
        assert part.function_call.args == {"city": "Oslo"}

    def test_null_args_become_empty_object(self):
        call = FunctionCall.model_validate({"name": "lookup_weather", "args": None})
        assert call.args == {}

    def test_missing_args_become_empty_object(self):
        call = FunctionCall.model_validate({"name": "lookup_weather"})
        assert call.args == {}

    def test_part_without_known_fields_is_empty(self):
        part = Part.model_validate({"somethingNew": 1})
        assert part.kind == PartKind.EMPTY

    def test_thought_signature_only_part(self):
        part = Part.model_validate({"thoughtSignature": "abc"})
        assert part.kind == PartKind.THOUGHT_SIGNATURE

    def test_empty_text_is_not_text(self):
        assert Part(text="").kind == PartKind.EMPTY
        assert Part.from_text("hi").kind == PartKind.TEXT


class TestContent:
    def test_user_content_with_images(self):
        content = Content.user("what is this?", ["aGVsbG8=", "d29ybGQ="])
        assert content.role == "user"
        assert content.parts[0].text == "what is this?"
        assert [p.inline_data.mime_type for p in content.parts[1:]] == [
            "image/jpeg",
            "image/jpeg",
        ]

    def test_function_result_leads_with_response(self):
        content = Content.function_result(
            "lookup_weather", {"temp": 21}, [Part.from_text("extra")]
        )
        assert content.role == "function"
        assert content.parts[0].function_response.response == {"temp": 21}
        assert content.parts[1].text == "extra"

    def test_function_calls_in_order(self):
        content = Content.model_validate(
            {
                "role": "model",
                "parts": [
                    {"functionCall": {"name": "a_one"}},
                    {"text": "between"},
                    {"functionCall": {"name": "b_two"}},
                ],
            }
        )
        assert [c.name for c in content.function_calls] == ["a_one", "b_two"]


def test_request_body_omits_unset_fields():
    request = GenerateContentRequest(contents=[Content.user("hi")])
    body = json.loads(request.to_body())
    assert body == {"contents": [{"role": "user", "parts": [{"text": "hi"}]}]}
