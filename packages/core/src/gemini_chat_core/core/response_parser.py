import json
import logging

from pydantic import ValidationError

from gemini_chat_core.core.types import (
    ROLE_MODEL,
    Content,
    GenerateContentResponse,
    Part,
)
from gemini_chat_core.utils.errors import EmptyResponseError, ParseError

logger = logging.getLogger(__name__)

# Text parts starting with this marker are treated as model thoughts and are
# never delivered to the output callback. The structured `thought` flag is
# deliberately not consulted here.
THOUGHT_MARKER = "**"


def is_thought_text(text: str | None) -> bool:
    return bool(text) and text.startswith(THOUGHT_MARKER)


def is_thought_part(part: Part) -> bool:
    return is_thought_text(part.text)


def parse_response(body: bytes | str) -> GenerateContentResponse:
    """
    Decodes and validates a generateContent response body.

    Raises:
        ParseError: body is not JSON or does not have the expected shape
        EmptyResponseError: no candidate, or the first candidate has no parts

    """
    try:
        document = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseError(f"Response is not valid JSON: {e}") from e

    if not isinstance(document, dict):
        raise ParseError(
            f"Expected a JSON object, got {type(document).__name__}"
        )

    try:
        response = GenerateContentResponse.model_validate(document)
    except ValidationError as e:
        raise ParseError(f"Malformed response: {e}") from e

    if not response.candidates:
        raise EmptyResponseError(
            "Response contains no candidates",
            details={"body": document},
        )

    content = response.candidates[0].content
    if content is None or not content.parts:
        raise EmptyResponseError(
            "First candidate has no content parts",
            details={"body": document},
        )

    if content.role is None:
        content.role = ROLE_MODEL

    return response


def first_content(response: GenerateContentResponse) -> Content:
    """The content of the first candidate of an already validated response."""
    content = response.candidates[0].content
    if content is None:
        raise EmptyResponseError("First candidate has no content")
    return content
