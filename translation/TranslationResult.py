# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-18
# Description: TranslationResult
# -----------------------------------------------------------------------------
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ModelTranslation(BaseModel):
    """Shape the chat model is asked to reply with (JSON object)."""

    detectedLanguage: str = Field(..., min_length=2, max_length=16)
    translatedText: str
    wasTranslated: bool
    technicalTerms: List[str] = Field(default_factory=list)


@dataclass(frozen=True)
class TranslationResult:
    """
    Either a structured translation or the "untranslated" fallback.
    The fallback always carries the original text so storage can proceed.
    """

    original_text: str
    translated_text: str
    was_translated: bool
    detected_language: str
    technical_terms: List[str] = field(default_factory=list)
    fallback_reason: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.fallback_reason is not None

    @classmethod
    def unchanged(cls, text: str, language: str = "en") -> "TranslationResult":
        """Input already English: nothing to do."""
        return cls(
            original_text=text,
            translated_text=text,
            was_translated=False,
            detected_language=language,
        )

    @classmethod
    def untranslated(cls, text: str, reason: str) -> "TranslationResult":
        """Best-effort degrade: keep the original, mark language unknown."""
        return cls(
            original_text=text,
            translated_text=text,
            was_translated=False,
            detected_language="unknown",
            fallback_reason=reason,
        )

    def provenance(self) -> Dict[str, Any]:
        """Metadata fragment merged into stored records."""
        return {
            "detectedLanguage": self.detected_language,
            "technicalTerms": list(self.technical_terms),
        }
