# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-16
# Description: KBChunker
# -----------------------------------------------------------------------------
import logging
from typing import List, Optional

import settings
from chunking.KBChunk import KBChunk
from utility.logging_utils import get_class_logger
from utility.validation import validate_chunk_params


class KBChunker:
    """
    Splits long text into overlapping word windows.

    The unit of length is a whitespace-delimited word, never a character,
    so identifiers such as `sap.ui.core.mvc.Controller` are never cut in half.
    """

    def __init__(
        self,
        *,
        max_words: Optional[int] = None,
        overlap_words: Optional[int] = None,
        logger: logging.Logger | None = None,
    ):
        self.max_words = settings.CHUNK_MAX_WORDS if max_words is None else max_words
        self.overlap_words = settings.CHUNK_OVERLAP_WORDS if overlap_words is None else overlap_words
        self.logger = logger or get_class_logger(self.__class__)

        validate_chunk_params(self.max_words, self.overlap_words)

    def split(
        self,
        text: str,
        max_units: Optional[int] = None,
        overlap_units: Optional[int] = None,
    ) -> List[str]:
        """Return the chunk strings in document order."""
        return [c.text for c in self.chunk_text(text, max_units, overlap_units)]

    def chunk_text(
        self,
        text: str,
        max_units: Optional[int] = None,
        overlap_units: Optional[int] = None,
    ) -> List[KBChunk]:
        max_units = self.max_words if max_units is None else max_units
        overlap_units = self.overlap_words if overlap_units is None else overlap_units
        validate_chunk_params(max_units, overlap_units)

        words = (text or "").split()
        num_words = len(words)
        step = max_units - overlap_units

        chunks: List[KBChunk] = []
        start_idx = 0
        while start_idx < num_words:
            end_idx = min(start_idx + max_units, num_words)
            chunk_text = " ".join(words[start_idx:end_idx])

            if chunk_text.strip():
                chunks.append(
                    KBChunk(
                        index=len(chunks),
                        text=chunk_text,
                        word_start=start_idx,
                        word_end=end_idx,
                    )
                )

            if end_idx == num_words:
                break

            start_idx += step

        if chunks:
            avg_words = sum(c.word_count for c in chunks) / len(chunks)
            self.logger.info(
                "Chunking Summary: words=%d chunks=%d | max=%d overlap=%d | avg_len=%.1f words",
                num_words,
                len(chunks),
                max_units,
                overlap_units,
                avg_words,
            )
        else:
            self.logger.warning("No chunks produced (words=%d)", num_words)

        return chunks
