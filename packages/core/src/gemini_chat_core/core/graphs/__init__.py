"""
LangGraph graphs for a Gemini chat turn
"""

from .states import ChatTurnState

__all__ = [
    "ChatTurnState",
]
