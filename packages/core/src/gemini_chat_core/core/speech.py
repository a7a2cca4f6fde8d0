import base64
import binascii
import json
import logging

from pydantic import ValidationError

from gemini_chat_core.config.config import GeminiProps
from gemini_chat_core.config.models import DEFAULT_VOICE_NAME
from gemini_chat_core.core.cancellation import CancelSignal
from gemini_chat_core.core.transport import GeminiTransport
from gemini_chat_core.core.types import (
    Content,
    GenerateContentRequest,
    GenerateContentResponse,
    GenerationConfig,
    Part,
)
from gemini_chat_core.utils.errors import DecodeError, EmptyResponseError, ParseError

logger = logging.getLogger(__name__)

AUDIO_MODALITY = "AUDIO"


def build_speech_request(text: str, voice_name: str) -> GenerateContentRequest:
    return GenerateContentRequest(
        contents=[Content(parts=[Part.from_text(text)])],
        generation_config=GenerationConfig(
            response_modalities=[AUDIO_MODALITY],
            speech_config={
                "voice_config": {
                    "prebuilt_voice_config": {"voice_name": voice_name}
                }
            },
        ),
    )


def extract_audio(body: bytes | str) -> bytes:
    """
    Decodes the base64 audio of the first candidate's first part.

    Raises:
        ParseError: body is not a JSON response document
        EmptyResponseError: no audio payload present
        DecodeError: payload is not valid base64

    """
    try:
        response = GenerateContentResponse.model_validate_json(body)
    except (ValidationError, json.JSONDecodeError) as e:
        raise ParseError(f"Speech response is not valid: {e}") from e

    try:
        part = response.candidates[0].content.parts[0]
    except (IndexError, AttributeError):
        raise EmptyResponseError("Speech response has no content") from None

    if part.inline_data is None or not part.inline_data.data:
        raise EmptyResponseError("Speech response has no audio data")

    try:
        return base64.b64decode(part.inline_data.data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Audio payload is not valid base64: {e}") from e


class SpeechSynthesizer:
    """Single request/response text-to-speech client."""

    def __init__(self, props: GeminiProps, transport: GeminiTransport):
        self.props = props
        self.transport = transport

    async def synthesize(
        self,
        text: str,
        voice_name: str = DEFAULT_VOICE_NAME,
        cancel_signal: CancelSignal | None = None,
    ) -> bytes:
        """Returns raw audio bytes for `text` spoken by `voice_name`."""
        request = build_speech_request(text, voice_name)
        body = await self.transport.send(
            self.props.tts_url(), request.to_body(), cancel_signal
        )
        try:
            return extract_audio(body)
        except (ParseError, EmptyResponseError, DecodeError) as e:
            logger.error(f"Speech synthesis failed: {e}")
            raise
