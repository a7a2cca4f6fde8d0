"""
Core type definitions for the Gemini chat core.

Wire records for the generateContent protocol. Incoming documents may use
either snake_case or camelCase keys; outgoing requests are serialized in
snake_case with unset fields omitted.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from gemini_chat_core.utils.errors import GeminiError

ROLE_USER = "user"
ROLE_MODEL = "model"
ROLE_FUNCTION = "function"

DEFAULT_IMAGE_MIME_TYPE = "image/jpeg"
JSON_MIME_TYPE = "application/json"

# thinking_budget sentinel: the model decides how much to think.
UNLIMITED_THINKING_BUDGET = -1


class WireModel(BaseModel):
    """Base for protocol records: accepts both key styles, ignores extras."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class PartKind(str, Enum):
    TEXT = "text"
    INLINE_DATA = "inline_data"
    FUNCTION_CALL = "function_call"
    FUNCTION_RESPONSE = "function_response"
    THOUGHT_SIGNATURE = "thought_signature"
    EMPTY = "empty"


class InlineData(WireModel):
    mime_type: str
    data: str


class FunctionCall(WireModel):
    name: str
    args: dict[str, Any] = Field(default_factory=dict)

    @field_validator("args", mode="before")
    @classmethod
    def _null_args(cls, value: Any) -> Any:
        return {} if value is None else value


class FunctionResponse(WireModel):
    name: str
    response: dict[str, Any] = Field(default_factory=dict)


class Part(WireModel):
    """
    One unit of content.

    In practice exactly one variant is populated. A part with none of the
    known fields is valid and classified as EMPTY.
    """

    text: str | None = None
    inline_data: InlineData | None = None
    function_call: FunctionCall | None = None
    function_response: FunctionResponse | None = None
    thought: bool | None = None
    thought_signature: str | None = None

    @property
    def kind(self) -> PartKind:
        if self.function_call is not None:
            return PartKind.FUNCTION_CALL
        if self.function_response is not None:
            return PartKind.FUNCTION_RESPONSE
        if self.inline_data is not None:
            return PartKind.INLINE_DATA
        if self.text:
            return PartKind.TEXT
        if self.thought_signature is not None:
            return PartKind.THOUGHT_SIGNATURE
        return PartKind.EMPTY

    @classmethod
    def from_text(cls, text: str) -> "Part":
        return cls(text=text)

    @classmethod
    def from_image(
        cls, data: str, mime_type: str = DEFAULT_IMAGE_MIME_TYPE
    ) -> "Part":
        return cls(inline_data=InlineData(mime_type=mime_type, data=data))

    @classmethod
    def from_function_response(
        cls, name: str, response: dict[str, Any]
    ) -> "Part":
        return cls(
            function_response=FunctionResponse(name=name, response=response)
        )


class Content(WireModel):
    """A conversation turn. Role is informational and not enforced."""

    role: str | None = None
    parts: list[Part] = Field(default_factory=list)

    @classmethod
    def user(
        cls, query: str, base64_images: list[str] | None = None
    ) -> "Content":
        """User turn: the query text followed by optional JPEG images."""
        parts = [Part.from_text(query)]
        if base64_images:
            parts.extend(Part.from_image(img) for img in base64_images)
        return cls(role=ROLE_USER, parts=parts)

    @classmethod
    def function_result(
        cls,
        name: str,
        response: dict[str, Any],
        extra_parts: list[Part] | None = None,
    ) -> "Content":
        parts = [Part.from_function_response(name, response)]
        if extra_parts:
            parts.extend(extra_parts)
        return cls(role=ROLE_FUNCTION, parts=parts)

    @property
    def function_calls(self) -> list[FunctionCall]:
        return [p.function_call for p in self.parts if p.function_call]


Conversation = list[Content]


# --- Request records ---


class ThinkingConfig(WireModel):
    thinking_budget: int = UNLIMITED_THINKING_BUDGET
    include_thoughts: bool = True


class GenerationConfig(WireModel):
    response_mime_type: str | None = None
    response_schema: dict[str, Any] | None = None
    thinking_config: ThinkingConfig | None = None
    response_modalities: list[str] | None = None
    speech_config: dict[str, Any] | None = None


class Tool(WireModel):
    function_declarations: list[dict[str, Any]]


class GenerateContentRequest(WireModel):
    system_instruction: Content | None = None
    contents: list[Content]
    tools: list[Tool] | None = None
    generation_config: GenerationConfig | None = None

    def to_body(self) -> bytes:
        return self.model_dump_json(exclude_none=True).encode("utf-8")


# --- Response records ---


class Candidate(WireModel):
    content: Content | None = None
    finish_reason: str | None = None


class UsageMetadata(WireModel):
    prompt_token_count: int = 0
    candidates_token_count: int = 0
    cached_content_token_count: int = 0
    thoughts_token_count: int = 0
    tool_use_prompt_token_count: int = 0
    total_token_count: int = 0


class GenerateContentResponse(WireModel):
    candidates: list[Candidate] = Field(default_factory=list)
    usage_metadata: UsageMetadata | None = None


# --- Turn outcome ---


class TurnStatus(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class TurnResult(BaseModel):
    """Outcome of one ChatSession.chat call."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    status: TurnStatus
    text: str | None = None
    error: GeminiError | None = None
    conversation: list[Content] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == TurnStatus.COMPLETED
