# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-15
# Description: text_utils.py
# -----------------------------------------------------------------------------
import re
from typing import Optional

import settings

_WHITESPACE_RE = re.compile(r"\s+")


def clean_text_for_embedding(text: str, max_chars: Optional[int] = None) -> str:
    """Collapse whitespace runs to a single space, trim, and cap to the model input limit."""
    limit = settings.MAX_EMBED_CHARS if max_chars is None else max_chars
    cleaned = _WHITESPACE_RE.sub(" ", text or "").strip()
    return cleaned[:limit].rstrip()


def count_words(text: str) -> int:
    return len((text or "").split())


def preview(text: str, n: int = 50) -> str:
    """Return a compact single-line preview for logging."""
    clean = " ".join((text or "").split())
    return (clean[:n] + "...") if len(clean) > n else clean
