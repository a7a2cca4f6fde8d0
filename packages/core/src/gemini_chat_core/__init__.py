"""
Gemini chat core: a tool-calling chat orchestrator for the Gemini
generateContent API.
"""

from .config.config import GeminiProps
from .core.session import ChatSession
from .core.types import Content, Part, TurnResult, TurnStatus
from .tools import FunctionDispatcher, FunctionRegistry, HandlerGroup
from .utils.errors import GeminiError

__version__ = "0.1.0"

__all__ = [
    "ChatSession",
    "Content",
    "FunctionDispatcher",
    "FunctionRegistry",
    "GeminiError",
    "GeminiProps",
    "HandlerGroup",
    "Part",
    "TurnResult",
    "TurnStatus",
]
