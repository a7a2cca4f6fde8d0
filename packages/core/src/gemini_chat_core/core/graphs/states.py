"""
LangGraph state definitions for a chat turn
"""

from typing import TypedDict

from gemini_chat_core.core.types import (
    Content,
    FunctionCall,
    GenerateContentRequest,
    GenerateContentResponse,
)


class ChatTurnState(TypedDict):
    """
    单个聊天回合的状态

    `conversation` is the working copy: committed history plus everything
    produced during this turn. Committed history itself lives outside the
    graph and is only touched by the commit node.
    """

    # 工作会话
    conversation: list[Content]

    # 当前请求/响应
    request: GenerateContentRequest | None
    response_body: bytes | None
    response: GenerateContentResponse | None

    # 函数调用
    pending_calls: list[FunctionCall]

    # 输出
    latest_text: str

    # 元数据
    round: int
    request_started_at: float
