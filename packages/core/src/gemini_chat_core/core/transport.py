import logging

import httpx

from gemini_chat_core.core.cancellation import CancelSignal
from gemini_chat_core.utils.errors import TransportError, to_friendly_error
from gemini_chat_core.utils.paths import redact_api_key
from gemini_chat_core.utils.retry import retry_with_backoff

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


class GeminiTransport:
    """
    Posts JSON bodies to the Gemini REST endpoints.

    Every send is raced against a CancelSignal; when the signal wins, the
    HTTP request is abandoned and OperationCancelled is raised.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = 600.0,
        retry_attempts: int = 1,
        retry_initial_delay_ms: int = 5000,
        retry_max_delay_ms: int = 30000,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self.retry_attempts = retry_attempts
        self.retry_initial_delay_ms = retry_initial_delay_ms
        self.retry_max_delay_ms = retry_max_delay_ms

    async def send(
        self,
        url: str,
        body: bytes,
        cancel_signal: CancelSignal | None = None,
    ) -> bytes:
        """
        POST `body` to `url` and return the response body.

        Raises:
            TransportError: network failure or non-2xx status
            OperationCancelled: the cancel signal was set while waiting

        """
        signal = cancel_signal or CancelSignal()

        if self.retry_attempts <= 1:
            return await signal.run(self._post(url, body))

        @retry_with_backoff(
            max_attempts=self.retry_attempts,
            initial_delay_ms=self.retry_initial_delay_ms,
            max_delay_ms=self.retry_max_delay_ms,
            cancel_signal=signal,
        )
        async def post_with_retry() -> bytes:
            return await signal.run(self._post(url, body))

        return await post_with_retry()

    async def _post(self, url: str, body: bytes) -> bytes:
        logger.debug(f"POST {redact_api_key(url)} ({len(body)} bytes)")
        try:
            response = await self._client.post(
                url, content=body, headers=JSON_HEADERS
            )
        except httpx.HTTPError as e:
            error = to_friendly_error(e)
            logger.error(f"Gemini request failed: {error}")
            raise error from e

        if not response.is_success:
            logger.error(
                f"Gemini Error: HTTP {response.status_code}\n"
                f"Response: {response.text}"
            )
            details = {"body": response.text}
            retry_after = response.headers.get("retry-after")
            if retry_after:
                details["retry_after"] = retry_after
            raise TransportError(
                f"HTTP {response.status_code}: {response.reason_phrase}",
                status_code=response.status_code,
                details=details,
            )

        return response.content

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "GeminiTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
