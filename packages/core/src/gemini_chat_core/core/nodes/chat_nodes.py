import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

from gemini_chat_core.config.config import GeminiProps
from gemini_chat_core.core.cancellation import CancelSignal
from gemini_chat_core.core.graphs.states import ChatTurnState
from gemini_chat_core.core.history import HistoryBuffer
from gemini_chat_core.core.request_builder import (
    FunctionDeclarations,
    build_request,
)
from gemini_chat_core.core.response_parser import (
    first_content,
    is_thought_part,
    parse_response,
)
from gemini_chat_core.core.transport import GeminiTransport
from gemini_chat_core.telemetry import (
    ApiErrorEvent,
    ApiRequestEvent,
    ApiResponseEvent,
    log_api_error,
    log_api_request,
    log_api_response,
)
from gemini_chat_core.tools.dispatcher import FunctionDispatcher
from gemini_chat_core.utils.errors import GeminiError, TransportError
from gemini_chat_core.utils.session_logger import SessionLogger

logger = logging.getLogger(__name__)

OutputCallback = Callable[[str], Any]


class ChatNodeContext:
    """聊天节点的共享上下文"""

    def __init__(
        self,
        props: GeminiProps,
        transport: GeminiTransport,
        dispatcher: FunctionDispatcher,
        history: HistoryBuffer,
        session_logger: SessionLogger,
        cancel_signal: CancelSignal,
        system_instruction: str,
        callback: OutputCallback,
        json_schema: Mapping[str, Any] | None = None,
        function_declarations: FunctionDeclarations | None = None,
    ):
        self.props = props
        self.transport = transport
        self.dispatcher = dispatcher
        self.history = history
        self.session_logger = session_logger
        self.cancel_signal = cancel_signal
        self.system_instruction = system_instruction
        self.callback = callback
        self.json_schema = json_schema
        self.function_declarations = function_declarations


async def build_request_node(
    state: ChatTurnState, ctx: ChatNodeContext
) -> dict[str, Any]:
    """
    构建请求节点

    Args:
        state: 当前回合状态
        ctx: 节点上下文

    Returns:
        状态更新

    """
    ctx.cancel_signal.raise_if_set()

    next_round = state["round"] + 1
    if next_round > ctx.props.max_rounds:
        raise GeminiError(
            f"Chat turn exceeded {ctx.props.max_rounds} model calls",
            "max_rounds_exceeded",
        )

    request = build_request(
        state["conversation"],
        ctx.system_instruction,
        json_schema=ctx.json_schema,
        function_declarations=ctx.function_declarations,
    )
    return {"request": request, "round": next_round}


async def send_request_node(
    state: ChatTurnState, ctx: ChatNodeContext
) -> dict[str, Any]:
    """
    发送请求节点

    The whole conversation is resent every round; the endpoint is stateless.
    """
    request = state["request"]
    if request is None:
        raise GeminiError("No request to send", "invalid_state")

    model = ctx.props.model
    log_api_request(
        ApiRequestEvent(
            model=model,
            round=state["round"],
            content_count=len(request.contents),
        )
    )

    start_time = time.time()
    try:
        body = await ctx.transport.send(
            ctx.props.generate_content_url(),
            request.to_body(),
            ctx.cancel_signal,
        )
    except TransportError as e:
        log_api_error(
            ApiErrorEvent(
                model=model,
                error=str(e),
                error_type=e.error_type,
                status_code=e.status_code,
                duration_ms=int((time.time() - start_time) * 1000),
            )
        )
        raise

    return {"response_body": body, "request_started_at": start_time}


async def parse_response_node(
    state: ChatTurnState, ctx: ChatNodeContext
) -> dict[str, Any]:
    """
    解析响应节点

    Text parts are delivered to the callback in order once the whole
    response has been parsed; thought parts are recorded but not delivered.
    """
    model = ctx.props.model
    duration_ms = int((time.time() - state["request_started_at"]) * 1000)

    try:
        response = parse_response(state["response_body"] or b"")
    except GeminiError as e:
        logger.error(f"Invalid response from Gemini API: {e}")
        log_api_error(
            ApiErrorEvent(
                model=model,
                error=str(e),
                error_type=e.error_type,
                duration_ms=duration_ms,
            )
        )
        raise

    model_content = first_content(response)
    function_calls = model_content.function_calls

    usage = response.usage_metadata
    log_api_response(
        ApiResponseEvent(
            model=model,
            duration_ms=duration_ms,
            input_token_count=usage.prompt_token_count if usage else 0,
            output_token_count=usage.candidates_token_count if usage else 0,
            cached_content_token_count=(
                usage.cached_content_token_count if usage else 0
            ),
            thoughts_token_count=usage.thoughts_token_count if usage else 0,
            tool_token_count=usage.tool_use_prompt_token_count if usage else 0,
            total_token_count=usage.total_token_count if usage else 0,
            function_call_count=len(function_calls),
        )
    )

    latest_text = state["latest_text"]
    for part in model_content.parts:
        if not part.text:
            continue
        latest_text = part.text
        if is_thought_part(part):
            logger.debug(f"Suppressed thought: {part.text[:80]}")
            continue
        ctx.cancel_signal.raise_if_set()
        ctx.callback(part.text)

    return {
        "conversation": [*state["conversation"], model_content],
        "response": response,
        "response_body": None,
        "pending_calls": function_calls,
        "latest_text": latest_text,
    }


def check_function_calls_edge(state: ChatTurnState) -> str:
    """
    检查是否有函数调用的条件边

    Returns:
        下一个节点的名称

    """
    if state.get("pending_calls"):
        return "dispatch_functions"
    return "commit"


async def dispatch_functions_node(
    state: ChatTurnState, ctx: ChatNodeContext
) -> dict[str, Any]:
    """
    执行函数调用节点

    Calls run sequentially; each produces one function-role Content.
    """
    conversation = list(state["conversation"])
    pending_calls = state["pending_calls"]
    logger.info(f"Executing {len(pending_calls)} function calls...")

    for call in pending_calls:
        ctx.cancel_signal.raise_if_set()
        function_content = await ctx.dispatcher.dispatch(
            call, ctx.cancel_signal
        )
        conversation.append(function_content)

    return {"conversation": conversation, "pending_calls": []}


async def commit_node(
    state: ChatTurnState, ctx: ChatNodeContext
) -> dict[str, Any]:
    """
    提交节点

    The only place committed history changes on success. The write-behind
    log happens afterwards and cannot fail the turn.
    """
    ctx.cancel_signal.raise_if_set()

    conversation = state["conversation"]
    if ctx.props.enable_history:
        ctx.history.commit(conversation)

    await ctx.session_logger.write_conversation(conversation)
    return {}
