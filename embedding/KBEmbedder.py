# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-20
# Description: KBEmbedder
# -----------------------------------------------------------------------------
import time
from typing import Any, List, Optional, Sequence

import numpy as np
from openai import OpenAI

import settings
from config.Config import Config
from errors import EmbeddingError, ValidationError
from utility.logging_utils import get_class_logger
from utility.text_utils import clean_text_for_embedding


class KBEmbedder:
    """
    Wraps the OpenAI embeddings endpoint.

    Every failure (transport, quota, malformed response, wrong dimension) is
    raised as EmbeddingError: a record without a vector is useless to the index,
    so nothing is substituted and nothing is retried here.
    """

    def __init__(
            self,
            cfg: Config,
            *,
            client: Any = None,
            dimensions: Optional[int] = None,
            batch_size: Optional[int] = None,
            normalize: Optional[bool] = None,
            logger=None,
    ):
        self.cfg = cfg
        self.dimensions = settings.EMBEDDING_DIM if dimensions is None else dimensions
        self.batch_size = settings.EMBED_BATCH_SIZE if batch_size is None else batch_size
        self.normalize = settings.EMBED_NORMALIZE if normalize is None else normalize
        self.logger = logger or get_class_logger(self.__class__)

        if self.batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {self.batch_size}")

        self.client = client or OpenAI(
            api_key=cfg.openai_api_key,
            base_url=getattr(cfg, "openai_base_url", None) or None,
        )
        self.model = getattr(cfg, "openai_embed_model", None) or "text-embedding-3-small"
        self.logger.info("OpenAI Embedder initialized model='%s' dim=%d", self.model, self.dimensions)

    def embed(self, text: str) -> List[float]:
        """Embed one text (cleaned first)."""
        return self.embed_batch([text])[0]

    def embed_batch(self, texts: Sequence[str]) -> List[List[float]]:
        """
        Embed texts in order; output[i] belongs to texts[i].
        Large inputs are split into sub-batches of `batch_size`.
        """
        cleaned = [clean_text_for_embedding(t) for t in texts]
        empties = [i for i, t in enumerate(cleaned) if not t]
        if empties:
            raise ValidationError(f"Cannot embed empty text (positions {empties})")

        total = len(cleaned)
        if total == 0:
            return []

        self.logger.info("Embedding %d text(s) (batch=%d)", total, self.batch_size)

        out: List[List[float]] = []
        for i in range(0, total, self.batch_size):
            out.extend(self._embed_request(cleaned[i:i + self.batch_size], offset=i))

        return out

    def _embed_request(self, texts: List[str], *, offset: int) -> List[List[float]]:
        start = time.time()
        try:
            resp = self.client.embeddings.create(
                model=self.model,
                input=texts,
                encoding_format="float",
            )
        except Exception as e:
            self.logger.error("Embedding request at offset %d failed: %s", offset, e)
            raise EmbeddingError(f"Embedding request failed: {e}") from e

        data = list(getattr(resp, "data", None) or [])
        if len(data) != len(texts):
            raise EmbeddingError(
                f"Embedding count mismatch at offset {offset}: sent {len(texts)}, got {len(data)}"
            )

        # The API tags each vector with its input position
        data.sort(key=lambda d: getattr(d, "index", 0))

        try:
            arr = np.asarray([d.embedding for d in data], dtype=np.float32)
        except (TypeError, ValueError, AttributeError) as e:
            raise EmbeddingError(f"Malformed embedding payload: {e}") from e

        if arr.ndim != 2 or arr.shape[1] == 0:
            raise EmbeddingError(f"Malformed embedding payload: shape={arr.shape}")
        if arr.shape[1] != self.dimensions:
            raise EmbeddingError(
                f"Embedding dimension mismatch: expected {self.dimensions}, got {arr.shape[1]}"
            )

        # Normalize vectors (cosine-friendly)
        if self.normalize:
            norms = np.linalg.norm(arr, axis=1, keepdims=True) + 1e-12
            arr = arr / norms

        self.logger.debug(
            "Embedded %d text(s) in %.1f ms (usage=%r)",
            len(texts),
            (time.time() - start) * 1000.0,
            getattr(resp, "usage", None),
        )
        return [[float(x) for x in row] for row in arr]
