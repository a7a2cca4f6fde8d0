"""Shared fixtures for gemini_chat_core tests."""

from typing import Any

import pytest

from gemini_chat_core.config.config import GeminiProps
from gemini_chat_core.tools.registry import FunctionRegistry


@pytest.fixture
def props(tmp_path):
    return GeminiProps(
        api_key="test-key",
        history_log_path=tmp_path / "chat_history.json",
    )


@pytest.fixture
def history_props(tmp_path):
    return GeminiProps(
        api_key="test-key",
        enable_history=True,
        history_log_path=tmp_path / "chat_history.json",
    )


class WeatherHandlers:
    def __init__(self):
        self.calls: list[dict[str, Any]] = []

    def weather(self, args):
        self.calls.append(args)
        return {"temp": 21}

    def fail(self, args):
        raise RuntimeError("sensor offline")


@pytest.fixture
def weather_handlers():
    return WeatherHandlers()


@pytest.fixture
def registry(weather_handlers):
    registry = FunctionRegistry()
    registry.register_group("lookup", weather_handlers)
    return registry
