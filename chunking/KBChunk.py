# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-16
# Description: KBChunk
# -----------------------------------------------------------------------------
from dataclasses import dataclass


@dataclass(frozen=True)
class KBChunk:
    """
    One word-bounded window of a larger document.
    word_start/word_end index into the whitespace-split word list (end exclusive).
    """

    index: int
    text: str
    word_start: int
    word_end: int

    @property
    def word_count(self) -> int:
        return self.word_end - self.word_start

    def short_preview(self, n: int = 120) -> str:
        """Return a compact text preview for logging/debugging."""
        preview = (self.text[:n] + "...") if len(self.text) > n else self.text
        return f"[#{self.index} | w{self.word_start}-{self.word_end}] {preview}"
