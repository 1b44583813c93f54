# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-27
# Description: EmbeddingHealth
# -----------------------------------------------------------------------------
import time
import logging
from typing import Optional

from embedding.KBEmbedder import KBEmbedder
from utility.logging_utils import get_logger


class EmbeddingHealth:
    """
    Smoke test for the embeddings endpoint.

    Verifies:
      - The embedding call completes successfully
      - The vector dimension matches the store's configured dimension
    """

    def __init__(
        self,
        embedder: KBEmbedder,
        expected_dim: Optional[int] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.embedder = embedder
        self.expected_dim = expected_dim if expected_dim is not None else embedder.dimensions
        self.logger = logger or get_logger(__name__)

    def run(self) -> bool:
        test_text = "Knowledge base embedding healthcheck"
        self.logger.info("Running embedding healthcheck using model: %s", self.embedder.model)

        try:
            start = time.time()
            vector = self.embedder.embed(test_text)
            elapsed_ms = (time.time() - start) * 1000.0
        except Exception as e:
            self.logger.exception("Embedding healthcheck FAILED: %s", e)
            return False

        dim = len(vector)
        self.logger.info("Embedding call succeeded in %.1f ms. Returned dimension: %d", elapsed_ms, dim)

        if dim != self.expected_dim:
            self.logger.warning("Dimension mismatch: expected %d, got %d.", self.expected_dim, dim)
            return False

        self.logger.info("Embedding healthcheck PASSED.")
        return True
