"""Tests for GeminiProps and path helpers."""

from gemini_chat_core.config.config import GeminiProps
from gemini_chat_core.config.models import DEFAULT_GEMINI_MODEL
from gemini_chat_core.utils.paths import redact_api_key


def test_defaults():
    props = GeminiProps(api_key="k")
    assert props.model == DEFAULT_GEMINI_MODEL
    assert props.enable_history is False
    assert props.max_history_length == 16
    assert props.retry_attempts == 1
    assert props.history_log_path.name == "chat_history.json"


def test_blank_model_falls_back_to_default():
    assert GeminiProps(model="  ").model == DEFAULT_GEMINI_MODEL


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("GEMINI_MODEL", "gemini-2.5-pro")
    monkeypatch.setenv("GEMINI_API_KEY", "from-env")
    monkeypatch.setenv("GEMINI_ENABLE_HISTORY", "true")
    props = GeminiProps()
    assert props.model == "gemini-2.5-pro"
    assert props.api_key == "from-env"
    assert props.enable_history is True


def test_urls():
    props = GeminiProps(api_key="k", model="m", tts_model="t")
    assert props.generate_content_url() == (
        "https://generativelanguage.googleapis.com/v1beta/models/"
        "m:generateContent?key=k"
    )
    assert props.tts_url().endswith("/models/t:generateContent?key=k")


def test_redact_api_key():
    assert redact_api_key("https://h/p?key=secret&alt=json") == (
        "https://h/p?key=***&alt=json"
    )
    assert redact_api_key("https://h/p") == "https://h/p"
