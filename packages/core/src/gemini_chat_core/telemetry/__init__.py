"""
Public API of the telemetry module: structured events logged through the
`gemini_chat_observable` logger.
"""

from .events import (
    ApiErrorEvent,
    ApiRequestEvent,
    ApiResponseEvent,
    FunctionCallEvent,
    TelemetryEvent,
    TurnCompleteEvent,
    UserPromptEvent,
)
from .logger import (
    JsonFormatter,
    log_api_error,
    log_api_request,
    log_api_response,
    log_function_call,
    log_turn_complete,
    log_user_prompt,
    observable_logger,
    setup_observable_logging,
)

__all__ = [
    # Loggers
    "JsonFormatter",
    "log_api_error",
    "log_api_request",
    "log_api_response",
    "log_function_call",
    "log_turn_complete",
    "log_user_prompt",
    "observable_logger",
    "setup_observable_logging",
    # Events
    "ApiErrorEvent",
    "ApiRequestEvent",
    "ApiResponseEvent",
    "FunctionCallEvent",
    "TelemetryEvent",
    "TurnCompleteEvent",
    "UserPromptEvent",
]
