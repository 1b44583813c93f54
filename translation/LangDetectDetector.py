# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-17
# Description: LangDetectDetector
# -----------------------------------------------------------------------------
from typing import Tuple

from langdetect import DetectorFactory, LangDetectException, detect_langs

# langdetect is non-deterministic unless seeded
DetectorFactory.seed = 0


class LangDetectDetector:
    """
    Offline language guess used to resolve "auto" before paying for a model call.
    Returns (lang_code, confidence); "und" when the text is too short or undecidable.
    """

    def __init__(self, min_chars: int = 12):
        self.min_chars = min_chars

    def detect(self, text: str) -> Tuple[str, float]:
        if not text or len(text.strip()) < self.min_chars:
            return "und", 0.0

        try:
            detections = detect_langs(text)
        except LangDetectException:
            return "und", 0.0

        if not detections:
            return "und", 0.0

        top = detections[0]  # most probable language
        return top.lang, float(top.prob)
