"""
Pydantic models for the structured telemetry events emitted by a chat turn.
"""

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, Field


class TelemetryEventBase(BaseModel):
    event_timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )


class UserPromptEvent(TelemetryEventBase):
    event_name: Literal["user_prompt"] = "user_prompt"
    prompt_length: int
    image_count: int = 0


class FunctionCallEvent(TelemetryEventBase):
    event_name: Literal["function_call"] = "function_call"
    function_name: str
    function_args: dict[str, Any]
    duration_ms: int
    success: bool
    error: str | None = None
    error_type: str | None = None


class ApiRequestEvent(TelemetryEventBase):
    event_name: Literal["api_request"] = "api_request"
    model: str
    round: int
    content_count: int


class ApiErrorEvent(TelemetryEventBase):
    event_name: Literal["api_error"] = "api_error"
    model: str
    error: str
    error_type: str | None = None
    status_code: int | str | None = None
    duration_ms: int


class ApiResponseEvent(TelemetryEventBase):
    event_name: Literal["api_response"] = "api_response"
    model: str
    status_code: int | str | None = 200
    duration_ms: int
    input_token_count: int = 0
    output_token_count: int = 0
    cached_content_token_count: int = 0
    thoughts_token_count: int = 0
    tool_token_count: int = 0
    total_token_count: int = 0
    function_call_count: int = 0


class TurnCompleteEvent(TelemetryEventBase):
    event_name: Literal["turn_complete"] = "turn_complete"
    status: str
    rounds: int
    history_length: int


TelemetryEvent = (
    UserPromptEvent
    | FunctionCallEvent
    | ApiRequestEvent
    | ApiErrorEvent
    | ApiResponseEvent
    | TurnCompleteEvent
)
