# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-19
# Description: KBTranslator
# -----------------------------------------------------------------------------
import json
import logging
from typing import Any, List, Optional

from pydantic import ValidationError as PydanticValidationError

import settings
from errors import TranslationError
from translation.LangDetectDetector import LangDetectDetector
from translation.TechnicalTerms import TechnicalTermProtector
from translation.TranslationResult import ModelTranslation, TranslationResult
from utility.logging_utils import get_class_logger
from utility.text_utils import preview


def normalize_language(language: Optional[str]) -> str:
    """'pt-BR' -> 'pt', '' / None -> 'auto'."""
    lang = (language or "").strip().lower().replace("_", "-")
    if not lang:
        return "auto"
    return lang.split("-", 1)[0]


class KBTranslator:
    """
    Normalises arbitrary-language text to English while leaving technical
    identifiers untouched.

    Translation is enrichment: every failure path returns
    TranslationResult.untranslated(...) instead of raising.
    """

    system_prompt: str = (
        "You translate technical content into English for a search index.\n"
        "Rules:\n"
        "1. Detect the language of the input (ISO 639-1 code, e.g. 'pt', 'es', 'en').\n"
        "2. Translate the input to English. If it is already English, return it unchanged.\n"
        "3. Never translate or alter placeholders of the form ⟦T0⟧, ⟦T1⟧, ... Keep every one of them.\n"
        "4. Never translate technical identifiers: uppercase codes, transaction codes, "
        "function/method/module names, class names, table and field names, code snippets.\n"
        "5. Reply with a JSON object only, with keys:\n"
        '   "detectedLanguage" (string), "translatedText" (string), '
        '"wasTranslated" (boolean), "technicalTerms" (array of strings found in the input).\n'
    )

    def __init__(
        self,
        chat_client: Any,
        *,
        detector: Optional[LangDetectDetector] = None,
        protector: Optional[TechnicalTermProtector] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        auto_min_confidence: Optional[float] = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.chat_client = chat_client
        self.detector = detector or LangDetectDetector()
        self.protector = protector or TechnicalTermProtector()
        self.temperature = settings.TRANSLATION_TEMPERATURE if temperature is None else temperature
        self.max_tokens = settings.TRANSLATION_MAX_TOKENS if max_tokens is None else max_tokens
        self.auto_min_confidence = (
            settings.AUTO_DETECT_MIN_CONFIDENCE if auto_min_confidence is None else auto_min_confidence
        )
        self.logger = logger or get_class_logger(self.__class__)

    def translate(self, text: str, source_language: Optional[str] = "auto") -> TranslationResult:
        lang = normalize_language(source_language)

        if not text or not text.strip():
            return TranslationResult.unchanged(text or "", "en" if lang == "auto" else lang)

        if lang == "en":
            return TranslationResult.unchanged(text, "en")

        if lang == "auto":
            detected, confidence = self.detector.detect(text)
            self.logger.debug("Auto-detected language=%s confidence=%.2f", detected, confidence)
            if detected == "en" and confidence >= self.auto_min_confidence:
                return TranslationResult.unchanged(text, "en")

        protected = self.protector.protect(text)
        self.logger.info(
            "Translating to English: source=%s chars=%d protected_terms=%d text=%r",
            lang,
            len(text),
            len(protected.terms),
            preview(text),
        )

        try:
            parsed = self._request_translation(protected.masked, lang)
        except TranslationError as e:
            self.logger.warning("Translation failed, keeping original text: %s", e, exc_info=True)
            return TranslationResult.untranslated(text, reason=str(e))

        detected_language = normalize_language(parsed.detectedLanguage)
        technical_terms = self._merge_terms(
            protected.term_list,
            [self.protector.restore(t, protected) for t in parsed.technicalTerms],
        )

        if not parsed.wasTranslated or detected_language == "en":
            # Already English: keep the caller's text byte-for-byte
            return TranslationResult(
                original_text=text,
                translated_text=text,
                was_translated=False,
                detected_language=detected_language,
                technical_terms=technical_terms,
            )

        translated = self.protector.restore(parsed.translatedText, protected).strip()
        if not translated:
            self.logger.warning("Model returned an empty translation; keeping original text")
            return TranslationResult.untranslated(text, reason="empty translation")

        missing = self.protector.missing_placeholders(parsed.translatedText, protected)
        if missing:
            self.logger.warning("Model dropped %d protected term(s): %s", len(missing), missing)

        self.logger.info(
            "Translated %s -> en (%d -> %d chars, terms=%d)",
            detected_language,
            len(text),
            len(translated),
            len(technical_terms),
        )
        return TranslationResult(
            original_text=text,
            translated_text=translated,
            was_translated=True,
            detected_language=detected_language,
            technical_terms=technical_terms,
        )

    def _request_translation(self, masked_text: str, lang: str) -> ModelTranslation:
        try:
            raw = self.chat_client.json_chat(
                user_text=self._build_user_payload(masked_text, lang),
                system_text=self.system_prompt,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            raise TranslationError(f"chat call failed: {type(e).__name__}: {e}") from e

        try:
            return ModelTranslation.model_validate_json(raw or "")
        except PydanticValidationError as e:
            raise TranslationError(f"malformed translation reply: {e.error_count()} error(s)") from e

    @staticmethod
    def _build_user_payload(masked_text: str, lang: str) -> str:
        hint = "unknown (detect it)" if lang == "auto" else lang
        return (
            f"SOURCE LANGUAGE HINT: {hint}\n"
            f"INPUT:\n{json.dumps(masked_text, ensure_ascii=False)}\n"
        )

    @staticmethod
    def _merge_terms(*groups: List[str]) -> List[str]:
        merged: List[str] = []
        for group in groups:
            for term in group:
                term = (term or "").strip()
                if term and term not in merged:
                    merged.append(term)
        return merged
