from .cancellation import CancelSignal, OperationCancelled
from .types import (
    JSON_MIME_TYPE,
    ROLE_FUNCTION,
    ROLE_MODEL,
    ROLE_USER,
    Content,
    Conversation,
    FunctionCall,
    FunctionResponse,
    GenerateContentRequest,
    GenerateContentResponse,
    InlineData,
    Part,
    PartKind,
    TurnResult,
    TurnStatus,
)

__all__ = [
    "JSON_MIME_TYPE",
    "ROLE_FUNCTION",
    "ROLE_MODEL",
    "ROLE_USER",
    # Cancellation
    "CancelSignal",
    "OperationCancelled",
    # Types
    "Content",
    "Conversation",
    "FunctionCall",
    "FunctionResponse",
    "GenerateContentRequest",
    "GenerateContentResponse",
    "InlineData",
    "Part",
    "PartKind",
    "TurnResult",
    "TurnStatus",
]
