"""Shared test helpers: canned response documents and a fake transport."""

import asyncio
import json
from typing import Any

from gemini_chat_core.core.cancellation import CancelSignal


def text_response(*texts: str, role: str | None = "model") -> dict[str, Any]:
    content: dict[str, Any] = {"parts": [{"text": t} for t in texts]}
    if role is not None:
        content["role"] = role
    return {"candidates": [{"content": content, "finishReason": "STOP"}]}


def call_response(*calls: tuple[str, dict[str, Any]]) -> dict[str, Any]:
    parts = [{"functionCall": {"name": name, "args": args}} for name, args in calls]
    return {"candidates": [{"content": {"role": "model", "parts": parts}}]}


def function_responses(request: dict[str, Any]) -> list[dict[str, Any]]:
    """All function responses of a serialized request, in order."""
    return [
        part["function_response"]
        for content in request["contents"]
        for part in content["parts"]
        if "function_response" in part
    ]


class FakeTransport:
    """
    Stands in for GeminiTransport.

    Replies are consumed in order. A reply may be a dict (JSON encoded), raw
    bytes, an exception to raise, or None to block until cancelled.
    """

    def __init__(self, *replies: Any):
        self.replies = list(replies)
        self.requests: list[dict[str, Any]] = []
        self.urls: list[str] = []
        self.called = asyncio.Event()
        self.closed = False

    async def send(
        self, url: str, body: bytes, cancel_signal: CancelSignal | None = None
    ) -> bytes:
        signal = cancel_signal or CancelSignal()
        self.urls.append(url)
        self.requests.append(json.loads(body))
        self.called.set()

        if not self.replies:
            raise AssertionError("FakeTransport ran out of replies")
        reply = self.replies.pop(0)
        if reply is None:
            await signal.run(asyncio.Event().wait())
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, bytes):
            return reply
        return json.dumps(reply).encode("utf-8")

    async def aclose(self) -> None:
        self.closed = True
