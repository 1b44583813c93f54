# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-24
# Description: KBSearchService
# -----------------------------------------------------------------------------
import logging
from typing import List, Optional, Sequence, Tuple

import settings
from errors import ValidationError
from embedding.KBEmbedder import KBEmbedder
from search.SearchResults import (
    DebugDistanceResponse,
    ProgressiveSearchResponse,
    SearchHit,
    SearchResponse,
)
from translation.KBTranslator import KBTranslator
from translation.TranslationResult import TranslationResult
from utility.logging_utils import get_class_logger
from utility.text_utils import preview
from utility.validation import (
    validate_content,
    validate_content_type,
    validate_distance,
    validate_language,
    validate_limit,
)
from vectorstore.KBVectorStore import KBVectorStore


class KBSearchService:
    """
    Nearest-neighbour search over the knowledge base.

    Every call translates the query at most once and embeds it exactly once;
    progressive mode re-queries the store with the same vector for each
    threshold until something comes back.
    """

    def __init__(
        self,
        *,
        store: KBVectorStore,
        embedder: KBEmbedder,
        translator: KBTranslator,
        logger: logging.Logger | None = None,
    ) -> None:
        self.store = store
        self.embedder = embedder
        self.translator = translator
        self.logger = logger or get_class_logger(self.__class__)

    # ------------------------------------------------------------------
    # Fixed threshold
    # ------------------------------------------------------------------
    def search(
        self,
        query_text: str,
        content_type: Optional[str] = None,
        limit: int = settings.SEARCH_DEFAULT_LIMIT,
        threshold: float = settings.SEARCH_DEFAULT_THRESHOLD,
        max_distance: Optional[float] = None,
        language: str = "auto",
    ) -> SearchResponse:
        query_text = validate_content(query_text, max_chars=settings.SEARCH_MAX_QUERY_CHARS, field="query")
        content_type = validate_content_type(content_type, optional=True)
        limit = validate_limit(limit)
        threshold = validate_distance(threshold, field="threshold", upper=settings.SEARCH_MAX_THRESHOLD)
        if max_distance is not None:
            max_distance = validate_distance(max_distance, field="max_distance")
        language = validate_language(language)

        translation, vector = self._prepare_query(query_text, language)

        hits = self._query(vector, threshold, max_distance, content_type, limit)
        self.logger.info(
            "Search complete: %d hit(s) threshold=%.2f max_distance=%s query=%r",
            len(hits),
            threshold,
            max_distance,
            preview(query_text),
        )
        return SearchResponse(
            query=query_text,
            search_query=translation.translated_text,
            results=hits,
            threshold=threshold,
            was_translated=translation.was_translated,
            detected_language=translation.detected_language,
        )

    # ------------------------------------------------------------------
    # Progressive thresholds
    # ------------------------------------------------------------------
    def search_progressive(
        self,
        query_text: str,
        content_type: Optional[str] = None,
        limit: int = settings.SEARCH_DEFAULT_LIMIT,
        language: str = "auto",
        max_distance: Optional[float] = settings.PROGRESSIVE_MAX_DISTANCE,
        thresholds: Optional[Sequence[float]] = None,
    ) -> ProgressiveSearchResponse:
        """
        Try each threshold in ascending order and stop at the first non-empty
        result set. max_distance is an absolute ceiling applied at every step;
        pass None to disable it.
        """
        query_text = validate_content(query_text, max_chars=settings.SEARCH_MAX_QUERY_CHARS, field="query")
        content_type = validate_content_type(content_type, optional=True)
        limit = validate_limit(limit)
        if max_distance is not None:
            max_distance = validate_distance(max_distance, field="max_distance")
        language = validate_language(language)
        ladder = self._threshold_ladder(thresholds)

        translation, vector = self._prepare_query(query_text, language)

        tested: List[float] = []
        hits: List[SearchHit] = []
        used: Optional[float] = None
        for threshold in ladder:
            tested.append(threshold)
            hits = self._query(vector, threshold, max_distance, content_type, limit)
            self.logger.debug("Progressive step threshold=%.2f -> %d hit(s)", threshold, len(hits))
            if hits:
                used = threshold
                break

        self.logger.info(
            "Progressive search complete: %d hit(s) used_threshold=%s tested=%s query=%r",
            len(hits),
            used,
            tested,
            preview(query_text),
        )
        return ProgressiveSearchResponse(
            query=query_text,
            search_query=translation.translated_text,
            results=hits,
            threshold=used,
            was_translated=translation.was_translated,
            detected_language=translation.detected_language,
            used_threshold=used,
            tested_thresholds=tested,
        )

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------
    def debug_distances(
        self,
        query_text: str,
        limit: int = settings.DEBUG_DISTANCE_LIMIT,
        language: str = "auto",
    ) -> DebugDistanceResponse:
        """Nearest rows with raw distances and no threshold; for tuning thresholds."""
        query_text = validate_content(query_text, max_chars=settings.SEARCH_MAX_QUERY_CHARS, field="query")
        limit = validate_limit(limit)
        language = validate_language(language)

        translation, vector = self._prepare_query(query_text, language)
        hits = self._query(vector, None, None, None, limit)
        for h in hits:
            self.logger.info("distance=%.4f id=%s type=%s %r", h.distance, h.id, h.content_type, preview(h.content))

        return DebugDistanceResponse(
            query=query_text,
            search_query=translation.translated_text,
            vector_dimension=len(vector),
            results=hits,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _prepare_query(self, query_text: str, language: str) -> Tuple[TranslationResult, List[float]]:
        translation = self.translator.translate(query_text, language)
        if translation.is_fallback:
            self.logger.warning("Searching with untranslated query: %s", translation.fallback_reason)
        return translation, self.embedder.embed(translation.translated_text)

    def _query(
        self,
        vector: List[float],
        threshold: Optional[float],
        max_distance: Optional[float],
        content_type: Optional[str],
        limit: int,
    ) -> List[SearchHit]:
        rows = self.store.query_by_vector(
            vector,
            threshold=threshold,
            max_distance=max_distance,
            content_type=content_type,
            limit=limit,
        )
        return [SearchHit.from_record(record, distance) for record, distance in rows]

    @staticmethod
    def _threshold_ladder(thresholds: Optional[Sequence[float]]) -> List[float]:
        raw = settings.PROGRESSIVE_THRESHOLDS if thresholds is None else thresholds
        ladder = sorted(
            {validate_distance(t, field="threshold", upper=settings.SEARCH_MAX_THRESHOLD) for t in raw}
        )
        if not ladder:
            raise ValidationError("thresholds must not be empty")
        return ladder
