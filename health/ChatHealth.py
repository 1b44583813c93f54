# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-27
# Description: ChatHealth
# -----------------------------------------------------------------------------
import logging
from typing import Optional

from chat.OpenAIChat import OpenAIChat
from utility.logging_utils import get_logger


class ChatHealth:
    """Smoke test for the chat model used by the translator."""

    def __init__(self, chat_client: OpenAIChat, logger: Optional[logging.Logger] = None):
        self.chat_client = chat_client
        self.logger = logger or get_logger(__name__)

    def run(self) -> bool:
        self.logger.info("Running chat healthcheck using model: %s", getattr(self.chat_client, "model", None))
        try:
            ok = bool(self.chat_client.healthcheck())
        except Exception as e:
            self.logger.exception("Chat healthcheck FAILED: %s", e)
            return False

        if ok:
            self.logger.info("Chat healthcheck PASSED.")
        else:
            self.logger.error("Chat healthcheck FAILED: empty reply")
        return ok
