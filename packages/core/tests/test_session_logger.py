"""Tests for the conversation log writer."""

import json

import pytest

from gemini_chat_core.core.types import Content, Part
from gemini_chat_core.utils.session_logger import SessionLogger


@pytest.mark.asyncio
async def test_writes_indented_json(tmp_path):
    log_path = tmp_path / "nested" / "chat_history.json"
    conversation = [
        Content.user("Hi"),
        Content(role="model", parts=[Part.from_text("Hello!")]),
    ]

    assert await SessionLogger(log_path).write_conversation(conversation)

    raw = log_path.read_text(encoding="utf-8")
    assert raw.startswith("[\n  {")
    assert json.loads(raw) == [
        {"role": "user", "parts": [{"text": "Hi"}]},
        {"role": "model", "parts": [{"text": "Hello!"}]},
    ]


@pytest.mark.asyncio
async def test_write_failure_is_reported_not_raised(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    logger = SessionLogger(blocker / "chat_history.json")

    assert await logger.write_conversation([Content.user("Hi")]) is False
