# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-27
# Description: DatabaseHealth
# -----------------------------------------------------------------------------
import logging
from typing import Optional

from utility.logging_utils import get_logger
from vectorstore.KBVectorStore import KBVectorStore


class DatabaseHealth:
    """Connectivity + read check against the vector store."""

    def __init__(self, store: KBVectorStore, logger: Optional[logging.Logger] = None):
        self.store = store
        self.logger = logger or get_logger(__name__)

    def run(self) -> bool:
        self.logger.info("Running database healthcheck")

        if not self.store.test_connection():
            self.logger.error("Database healthcheck FAILED: no connection")
            return False

        try:
            stats = self.store.stats()
        except Exception as e:
            self.logger.exception("Database healthcheck FAILED reading stats: %s", e)
            return False

        self.logger.info(
            "Database healthcheck PASSED (embeddings=%s, documents=%s)",
            stats.get("total_embeddings"),
            stats.get("total_documents"),
        )
        return True
