import logging
from collections.abc import Iterable, Iterator

from gemini_chat_core.config.config import MAX_CHAT_HISTORY_LENGTH
from gemini_chat_core.core.types import Content

logger = logging.getLogger(__name__)


class HistoryBuffer:
    """
    Bounded chat history.

    After every commit the buffer holds at most `max_length` entries; the
    oldest entries are evicted first and survivors keep their order.
    """

    def __init__(self, max_length: int = MAX_CHAT_HISTORY_LENGTH):
        if max_length < 1:
            raise ValueError("max_length must be at least 1")
        self.max_length = max_length
        self._entries: list[Content] = []

    def append(self, content: Content) -> None:
        self._entries.append(content.model_copy(deep=True))
        self.trim()

    def commit(self, conversation: Iterable[Content]) -> None:
        """Replaces the history with `conversation`, then trims it."""
        self._entries = [c.model_copy(deep=True) for c in conversation]
        self.trim()

    def trim(self) -> None:
        overflow = len(self._entries) - self.max_length
        if overflow > 0:
            del self._entries[:overflow]
            logger.debug(f"Trimmed {overflow} oldest history entries")

    def clear(self) -> None:
        self._entries.clear()

    def snapshot(self) -> list[Content]:
        """Deep copy of the committed entries, oldest first."""
        return [c.model_copy(deep=True) for c in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Content]:
        return iter(self.snapshot())
