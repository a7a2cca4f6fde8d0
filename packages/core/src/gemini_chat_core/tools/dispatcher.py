"""
Runs model-requested function calls against the FunctionRegistry.

Dispatch never raises to the caller (apart from cancellation): a missing
handler or a failing handler becomes an `{"error": message}` payload that
is sent back to the model as an ordinary function response.
"""

import inspect
import json
import logging
import time
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ValidationError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from gemini_chat_core.core.cancellation import CancelSignal, OperationCancelled
from gemini_chat_core.core.types import Content, FunctionCall, Part
from gemini_chat_core.telemetry import FunctionCallEvent, log_function_call
from gemini_chat_core.tools.registry import FunctionRegistry, Handler
from gemini_chat_core.utils.errors import (
    GeminiError,
    HandlerError,
    HandlerNotFoundError,
    get_error_message,
)

logger = logging.getLogger(__name__)

AS_CONTENT_ARG = "as_content"


def normalize_result(value: Any) -> dict[str, Any]:
    """
    Converts a handler's return value into a JSON-like object.

    None becomes {}, mappings and pydantic models are kept as objects, any
    other value is wrapped as {"result": value}.
    """
    if value is None:
        return {}
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, Mapping):
        result = dict(value)
    else:
        result = {"result": value}
    return to_jsonable_python(result)


def to_parts(content: Any) -> list[Part]:
    """Accepts a Part, a part dict, or a list of either."""
    if content is None:
        return []
    if isinstance(content, (Part, Mapping)):
        content = [content]
    parts = []
    for item in content:
        if isinstance(item, Part):
            parts.append(item)
        else:
            parts.append(Part.model_validate(item))
    return parts


def _accepts_arguments(handler: Handler) -> bool:
    try:
        signature = inspect.signature(handler)
    except (TypeError, ValueError):
        return True
    return len(signature.parameters) > 0


class FunctionDispatcher:
    """Resolves and invokes function calls, one at a time."""

    def __init__(self, registry: FunctionRegistry | None = None):
        self.registry = registry or FunctionRegistry()

    async def dispatch(
        self,
        call: FunctionCall,
        cancel_signal: CancelSignal | None = None,
    ) -> Content:
        """
        Executes one function call.

        Returns:
            A `function` role Content whose first part is the function
            response; with `as_content`, extra content parts follow it.

        Raises:
            OperationCancelled: cancellation was signaled while an async
                handler was running

        """
        signal = cancel_signal or CancelSignal()
        start_time = time.time()
        logger.info(
            f"Calling: {call.name} with args: {json.dumps(call.args, default=str)}"
        )

        extra_parts: list[Part] = []
        error: GeminiError | None = None
        try:
            handler = self.registry.resolve(call.name)
            raw_result = await self._invoke(handler, call, signal)
            response, extra_parts = self._split_result(call, raw_result)
        except OperationCancelled:
            raise
        except HandlerNotFoundError as e:
            logger.error(str(e))
            error = e
        except HandlerError as e:
            logger.error(f"Error executing function {call.name}: {e}")
            error = e
        except Exception as e:
            logger.error(
                f"Error executing function {call.name}: {e}", exc_info=True
            )
            error = HandlerError(call.name, get_error_message(e))

        if error is not None:
            response = {"error": str(error)}
            extra_parts = []

        log_function_call(
            FunctionCallEvent(
                function_name=call.name,
                function_args=to_jsonable_python(call.args, fallback=str),
                duration_ms=int((time.time() - start_time) * 1000),
                success=error is None,
                error=str(error) if error else None,
                error_type=error.error_type if error else None,
            )
        )
        return Content.function_result(call.name, response, extra_parts)

    async def _invoke(
        self, handler: Handler, call: FunctionCall, signal: CancelSignal
    ) -> Any:
        signal.raise_if_set()
        if _accepts_arguments(handler):
            result = handler(dict(call.args))
        else:
            result = handler()

        if inspect.isawaitable(result):
            result = await signal.run(result)
        return result

    def _split_result(
        self, call: FunctionCall, raw_result: Any
    ) -> tuple[dict[str, Any], list[Part]]:
        try:
            if not call.args.get(AS_CONTENT_ARG):
                return normalize_result(raw_result), []

            if not isinstance(raw_result, Mapping) or not (
                "content" in raw_result and "result" in raw_result
            ):
                raise HandlerError(
                    call.name,
                    f"Function {call.name} was called with {AS_CONTENT_ARG} "
                    "but did not return {content, result}",
                )
            return (
                normalize_result(raw_result["result"]),
                to_parts(raw_result["content"]),
            )
        except (PydanticSerializationError, ValidationError, TypeError) as e:
            raise HandlerError(
                call.name,
                f"Function {call.name} returned an unusable value: {e}",
            ) from e
