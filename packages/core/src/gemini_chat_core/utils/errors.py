import json
import logging
import tempfile
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class GeminiError(Exception):
    """Base class for every error raised by the chat core."""

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.error_type = error_type
        self.details = details or {}


class TransportError(GeminiError):
    """Network failure or non-success HTTP status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, "transport", details)
        self.status_code = status_code

    @property
    def is_transient(self) -> bool:
        """429 and 5xx responses are worth another attempt."""
        if self.status_code is None:
            return False
        return self.status_code == 429 or 500 <= self.status_code < 600


class ParseError(GeminiError):
    """Response body is not a well-formed generateContent document."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, "parse", details)


class EmptyResponseError(GeminiError):
    """Well-formed response without a usable candidate or content."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, "empty_response", details)


class DecodeError(GeminiError):
    """Inline payload could not be decoded (e.g. bad base64 audio)."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, "decode", details)


class HandlerNotFoundError(GeminiError):
    def __init__(self, function_name: str, reason: str | None = None):
        super().__init__(
            reason or f"Function {function_name} not found",
            "handler_not_found",
            {"function_name": function_name},
        )
        self.function_name = function_name


class HandlerError(GeminiError):
    def __init__(self, function_name: str, message: str):
        super().__init__(message, "handler", {"function_name": function_name})
        self.function_name = function_name


def get_error_message(error: Any) -> str:
    """Safely gets an error message from an exception."""
    if isinstance(error, Exception):
        return str(error) or error.__class__.__name__
    try:
        return str(error)
    except Exception:
        return "Failed to get error details"


def to_friendly_error(error: Any) -> Exception:
    """Converts httpx errors into TransportError, leaving others untouched."""
    if isinstance(error, httpx.HTTPStatusError):
        response = error.response
        return TransportError(
            f"HTTP {response.status_code}: {response.text}",
            status_code=response.status_code,
        )
    if isinstance(error, httpx.TimeoutException):
        return TransportError(f"Request timed out: {error}")
    if isinstance(error, httpx.HTTPError):
        return TransportError(f"Request failed: {get_error_message(error)}")
    if isinstance(error, Exception):
        return error
    return GeminiError(get_error_message(error))


async def report_error(
    error: Any,
    base_message: str,
    context: Any | None = None,
    error_type: str = "general",
):
    """Generates an error report and writes it to a temporary file."""
    timestamp = datetime.now().isoformat().replace(":", "-").replace(".", "-")
    report_file_name = f"gemini-chat-error-{error_type}-{timestamp}.json"
    report_path = Path(tempfile.gettempdir()) / report_file_name

    error_to_report = {}
    if isinstance(error, Exception):
        error_to_report["message"] = str(error)
        error_to_report["stack"] = "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        )
    else:
        error_to_report["message"] = get_error_message(error)

    report_content = {"error": error_to_report}
    if context:
        report_content["context"] = context

    try:
        report_str = json.dumps(report_content, indent=2, default=str)
        with report_path.open("w", encoding="utf-8") as f:
            f.write(report_str)
        logger.error(f"{base_message} Full report available at: {report_path}")
    except OSError as e:
        logger.error(f"{base_message} Failed to write error report: {e}")
        logger.error(f"Original error: {error_to_report['message']}")
