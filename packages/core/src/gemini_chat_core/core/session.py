"""
ChatSession: one logical chat surface.

A session owns its bounded history, configuration, transport and the
cancellation signal of the turn in flight. At most one turn runs per
session: starting a new turn supersedes the one in flight, which is
cancelled silently before the new one begins.
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from gemini_chat_core.config.config import GeminiProps
from gemini_chat_core.config.models import DEFAULT_VOICE_NAME
from gemini_chat_core.core.cancellation import CancelSignal, OperationCancelled
from gemini_chat_core.core.graphs.chat_graph import (
    create_chat_graph,
    recursion_limit_for,
)
from gemini_chat_core.core.graphs.states import ChatTurnState
from gemini_chat_core.core.history import HistoryBuffer
from gemini_chat_core.core.nodes.chat_nodes import (
    ChatNodeContext,
    OutputCallback,
)
from gemini_chat_core.core.request_builder import FunctionDeclarations
from gemini_chat_core.core.speech import SpeechSynthesizer
from gemini_chat_core.core.transport import GeminiTransport
from gemini_chat_core.core.types import Content, TurnResult, TurnStatus
from gemini_chat_core.telemetry import (
    TurnCompleteEvent,
    UserPromptEvent,
    log_turn_complete,
    log_user_prompt,
)
from gemini_chat_core.tools.dispatcher import FunctionDispatcher
from gemini_chat_core.tools.registry import FunctionRegistry
from gemini_chat_core.utils.errors import EmptyResponseError, GeminiError
from gemini_chat_core.utils.paths import redact_api_key
from gemini_chat_core.utils.session_logger import SessionLogger

logger = logging.getLogger(__name__)


def default_output_text(text: str) -> None:
    logger.info(f"DEFAULT OUTPUT: {text}\n\n")


class ChatSession:
    def __init__(
        self,
        props: GeminiProps | None = None,
        registry: FunctionRegistry | None = None,
        transport: GeminiTransport | None = None,
        session_logger: SessionLogger | None = None,
    ):
        self.props = props or GeminiProps()
        self.registry = registry or FunctionRegistry()
        self.history = HistoryBuffer(self.props.max_history_length)
        self.transport = transport or GeminiTransport(
            timeout=self.props.request_timeout,
            retry_attempts=self.props.retry_attempts,
            retry_initial_delay_ms=self.props.retry_initial_delay_ms,
            retry_max_delay_ms=self.props.retry_max_delay_ms,
        )
        self.session_logger = session_logger or SessionLogger(
            self.props.history_log_path
        )
        self.speech = SpeechSynthesizer(self.props, self.transport)

        self._turn_lock = asyncio.Lock()
        self._cancel_signal: CancelSignal | None = None
        self._closed = False

        logger.info(
            f"Using Gemini API Endpoint: "
            f"{redact_api_key(self.props.generate_content_url())}"
        )

    @property
    def in_flight(self) -> bool:
        return self._cancel_signal is not None and not self._cancel_signal.is_set()

    def cancel(self) -> bool:
        """Cancels the turn in flight. Returns False if there was none."""
        if not self.in_flight:
            return False
        logger.info("Cancelling in-flight chat turn")
        self._cancel_signal.set()
        return True

    async def chat(
        self,
        query: str,
        system_instruction: str,
        base64_images: list[str] | None = None,
        json_schema: Mapping[str, Any] | None = None,
        function_declarations: FunctionDeclarations | None = None,
        callback: OutputCallback | None = None,
    ) -> TurnResult:
        """
        Runs one chat turn until the model answers without function calls.

        Args:
            query: user text
            system_instruction: directive sent with every request
            base64_images: optional JPEG images attached to the user turn
            json_schema: request structured JSON output
            function_declarations: tools exposed to the model
            callback: receives each non-thought text part; when omitted a
                logging sink is used and the result carries the final text

        Returns:
            The turn outcome. Fatal errors are reported in the result,
            cancellation yields a CANCELLED result.

        """
        if self._closed:
            raise GeminiError("Chat session is closed", "session_closed")

        signal = CancelSignal()
        if self.in_flight:
            logger.info("New chat request supersedes the turn in flight")
            self._cancel_signal.set()
        self._cancel_signal = signal

        async with self._turn_lock:
            try:
                if signal.is_set():
                    return TurnResult(status=TurnStatus.CANCELLED)
                return await self._run_turn(
                    signal,
                    query,
                    system_instruction,
                    base64_images,
                    json_schema,
                    function_declarations,
                    callback,
                )
            finally:
                if self._cancel_signal is signal:
                    self._cancel_signal = None

    async def chat_text(self, query: str, system_instruction: str, **kwargs):
        """Like chat(), but returns the text or None on failure/cancel."""
        result = await self.chat(query, system_instruction, **kwargs)
        return result.text if result.ok else None

    async def _run_turn(
        self,
        signal: CancelSignal,
        query: str,
        system_instruction: str,
        base64_images: list[str] | None,
        json_schema: Mapping[str, Any] | None,
        function_declarations: FunctionDeclarations | None,
        callback: OutputCallback | None,
    ) -> TurnResult:
        ctx = ChatNodeContext(
            props=self.props,
            transport=self.transport,
            dispatcher=FunctionDispatcher(self.registry),
            history=self.history,
            session_logger=self.session_logger,
            cancel_signal=signal,
            system_instruction=system_instruction,
            callback=callback or default_output_text,
            json_schema=json_schema,
            function_declarations=function_declarations,
        )
        graph = create_chat_graph(ctx)

        log_user_prompt(
            UserPromptEvent(
                prompt_length=len(query),
                image_count=len(base64_images or []),
            )
        )

        # Working copy; committed history is only touched by the commit node.
        initial_state: ChatTurnState = {
            "conversation": [
                *self.history.snapshot(),
                Content.user(query, base64_images),
            ],
            "request": None,
            "response_body": None,
            "response": None,
            "pending_calls": [],
            "latest_text": "",
            "round": 0,
            "request_started_at": 0.0,
        }

        try:
            final_state = await graph.ainvoke(
                initial_state,
                config={
                    "recursion_limit": recursion_limit_for(
                        self.props.max_rounds
                    )
                },
            )
        except OperationCancelled:
            logger.info("Chat turn cancelled")
            self._log_turn(TurnStatus.CANCELLED, 0)
            return TurnResult(status=TurnStatus.CANCELLED)
        except EmptyResponseError as e:
            if self.props.enable_history:
                logger.warning("Clearing chat history after empty response")
                self.history.clear()
            self._log_turn(TurnStatus.FAILED, 0)
            return TurnResult(status=TurnStatus.FAILED, error=e)
        except GeminiError as e:
            logger.error(f"Chat turn failed: {e}")
            self._log_turn(TurnStatus.FAILED, 0)
            return TurnResult(status=TurnStatus.FAILED, error=e)

        self._log_turn(TurnStatus.COMPLETED, final_state["round"])
        return TurnResult(
            status=TurnStatus.COMPLETED,
            text="" if callback is not None else final_state["latest_text"],
            conversation=final_state["conversation"],
        )

    def _log_turn(self, status: TurnStatus, rounds: int) -> None:
        log_turn_complete(
            TurnCompleteEvent(
                status=status.value,
                rounds=rounds,
                history_length=len(self.history),
            )
        )

    async def synthesize_speech(
        self, text: str, voice_name: str = DEFAULT_VOICE_NAME
    ) -> bytes:
        """Text-to-speech through the session's transport."""
        if self._closed:
            raise GeminiError("Chat session is closed", "session_closed")
        return await self.speech.synthesize(text, voice_name)

    async def aclose(self) -> None:
        """Cancels any turn in flight and releases the HTTP client."""
        if self._closed:
            return
        self._closed = True
        self.cancel()
        async with self._turn_lock:
            await self.transport.aclose()

    async def __aenter__(self) -> "ChatSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
