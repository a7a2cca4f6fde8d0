"""
Write-behind log of the last completed conversation.

Best effort only: failures are logged and never propagate into the chat
turn that triggered the write.
"""

import json
import logging
from pathlib import Path

import aiofiles
from pydantic import TypeAdapter

from gemini_chat_core.core.types import Content
from gemini_chat_core.utils.paths import tildeify_path

logger = logging.getLogger(__name__)

_conversation_adapter = TypeAdapter(list[Content])


class SessionLogger:
    def __init__(self, log_file_path: Path):
        self.log_file_path = Path(log_file_path)

    async def write_conversation(self, conversation: list[Content]) -> bool:
        """Overwrites the log file with `conversation`. Returns success."""
        try:
            logger.debug(
                f"Writing chat history log to: {tildeify_path(self.log_file_path)}"
            )
            history_json = json.dumps(
                _conversation_adapter.dump_python(
                    conversation, mode="json", exclude_none=True
                ),
                indent=2,
            )
            self.log_file_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(
                self.log_file_path, "w", encoding="utf-8"
            ) as f:
                await f.write(history_json)
            return True
        except Exception as e:
            logger.error(f"Cannot write log: {e}")
            return False
