import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gemini_chat_core.config.models import (
    DEFAULT_GEMINI_API_HOST,
    DEFAULT_GEMINI_API_VERSION,
    DEFAULT_GEMINI_MODEL,
    DEFAULT_GEMINI_TTS_MODEL,
)
from gemini_chat_core.utils.paths import get_default_history_log_path

logger = logging.getLogger(__name__)

MAX_CHAT_HISTORY_LENGTH = 16


class GeminiProps(BaseSettings):
    """
    Per-session configuration.

    Every field can be supplied through a GEMINI_* environment variable,
    e.g. GEMINI_API_KEY or GEMINI_MODEL.
    """

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_", case_sensitive=False, extra="ignore"
    )

    model: str = DEFAULT_GEMINI_MODEL
    api_key: str = ""
    api_host: str = DEFAULT_GEMINI_API_HOST
    api_version: str = DEFAULT_GEMINI_API_VERSION
    tts_model: str = DEFAULT_GEMINI_TTS_MODEL

    # History
    enable_history: bool = False
    max_history_length: int = Field(MAX_CHAT_HISTORY_LENGTH, ge=1)
    history_log_path: Path = Field(default_factory=get_default_history_log_path)

    # Transport
    request_timeout: float = 600.0
    retry_attempts: int = Field(1, ge=1)
    retry_initial_delay_ms: int = 5000
    retry_max_delay_ms: int = 30000

    # Orchestrator
    max_rounds: int = Field(25, ge=1)
    debug: bool = False

    @field_validator("model", "tts_model", mode="before")
    @classmethod
    def _default_blank_model(cls, value, info):
        if value is None or (isinstance(value, str) and not value.strip()):
            return (
                DEFAULT_GEMINI_MODEL
                if info.field_name == "model"
                else DEFAULT_GEMINI_TTS_MODEL
            )
        return value

    def _model_url(self, model: str) -> str:
        return (
            f"https://{self.api_host}/{self.api_version}/models/"
            f"{model}:generateContent"
        )

    def generate_content_url(self) -> str:
        """Chat endpoint including the API key query parameter."""
        return f"{self._model_url(self.model)}?key={self.api_key}"

    def tts_url(self) -> str:
        """Speech synthesis endpoint including the API key query parameter."""
        return f"{self._model_url(self.tts_model)}?key={self.api_key}"
