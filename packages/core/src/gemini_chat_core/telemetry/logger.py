import json
import logging
import sys

from gemini_chat_core.telemetry.events import (
    ApiErrorEvent,
    ApiRequestEvent,
    ApiResponseEvent,
    FunctionCallEvent,
    TelemetryEvent,
    TurnCompleteEvent,
    UserPromptEvent,
)

# A standard Python logger for structured, observable logs
observable_logger = logging.getLogger("gemini_chat_observable")


class JsonFormatter(logging.Formatter):
    """Formats log records as JSON."""

    def format(self, record):
        log_object = {
            "timestamp": self.formatTime(record, self.datefmt),
            "name": record.name,
            "level": record.levelname,
            "message": record.getMessage(),
        }
        if hasattr(record, "data"):
            log_object["data"] = json.loads(record.data)
        return json.dumps(log_object)


def setup_observable_logging(stream=None) -> logging.Handler:
    """Sends telemetry events as JSON lines to `stream` (stderr by default)."""
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JsonFormatter())
    observable_logger.addHandler(handler)
    observable_logger.setLevel(logging.INFO)
    observable_logger.propagate = False
    return handler


def _log_to_observable(event: TelemetryEvent):
    observable_logger.info(
        event.event_name, extra={"data": event.model_dump_json()}
    )


def log_user_prompt(event: UserPromptEvent):
    _log_to_observable(event)


def log_function_call(event: FunctionCallEvent):
    _log_to_observable(event)


def log_api_request(event: ApiRequestEvent):
    _log_to_observable(event)


def log_api_error(event: ApiErrorEvent):
    _log_to_observable(event)


def log_api_response(event: ApiResponseEvent):
    _log_to_observable(event)


def log_turn_complete(event: TurnCompleteEvent):
    _log_to_observable(event)
