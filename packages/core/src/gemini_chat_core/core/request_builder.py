from collections.abc import Mapping, Sequence
from typing import Any

from gemini_chat_core.core.types import (
    JSON_MIME_TYPE,
    Content,
    GenerateContentRequest,
    GenerationConfig,
    Part,
    ThinkingConfig,
    Tool,
)

FunctionDeclarations = Sequence[Mapping[str, Any]] | Mapping[str, Any]


def normalize_function_declarations(
    declarations: FunctionDeclarations | None,
) -> list[dict[str, Any]] | None:
    """
    Accepts either a plain list of declarations or an object wrapping them
    under a "functions" (or "function_declarations") key.
    """
    if declarations is None:
        return None
    if isinstance(declarations, Mapping):
        for key in ("functions", "function_declarations"):
            if key in declarations:
                return [dict(d) for d in declarations[key]]
        # A single bare declaration
        return [dict(declarations)]
    return [dict(d) for d in declarations]


def build_request(
    conversation: Sequence[Content],
    system_instruction: str,
    json_schema: Mapping[str, Any] | None = None,
    function_declarations: FunctionDeclarations | None = None,
) -> GenerateContentRequest:
    """
    Assembles a generateContent request.

    Pure: the given conversation is deep-copied and never mutated.

    Args:
        conversation: the full conversation to send
        system_instruction: directive prepended to every request
        json_schema: if given, requests structured JSON output
        function_declarations: if given, exposed to the model as tools

    Returns:
        The request record.

    """
    generation_config = GenerationConfig(thinking_config=ThinkingConfig())

    if json_schema is not None:
        generation_config.response_mime_type = JSON_MIME_TYPE
        generation_config.response_schema = dict(json_schema)

    tools = None
    declarations = normalize_function_declarations(function_declarations)
    if declarations is not None:
        tools = [Tool(function_declarations=declarations)]

    return GenerateContentRequest(
        system_instruction=Content(parts=[Part.from_text(system_instruction)]),
        contents=[content.model_copy(deep=True) for content in conversation],
        tools=tools,
        generation_config=generation_config,
    )
