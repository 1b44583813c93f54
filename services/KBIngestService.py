# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-25
# Description: KBIngestService.py
# -----------------------------------------------------------------------------
from __future__ import annotations

import logging
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import settings
from chunking.KBChunker import KBChunker
from document.KBDocument import DocumentMetadata, DocumentRecord
from document.OwnerRecords import DocumentationOwner, OwnerFields, PromptOwner
from embedding.EmbeddingRecord import EmbeddingRecord
from embedding.KBEmbedder import KBEmbedder
from errors import ValidationError
from translation.KBTranslator import KBTranslator, normalize_language
from translation.TranslationResult import TranslationResult
from utility.logging_utils import get_class_logger
from utility.text_utils import clean_text_for_embedding, count_words
from utility.validation import (
    validate_chunk_params,
    validate_content,
    validate_content_type,
    validate_language,
    validate_metadata,
)
from vectorstore.KBVectorStore import KBVectorStore


@dataclass(frozen=True)
class IngestResult:
    document_id: int
    chunks_created: int
    total_words: int
    was_translated: bool
    language: str


@dataclass(frozen=True)
class _PreparedChunk:
    index: int
    content: str
    translation: TranslationResult


class KBIngestService:
    """
    Owns the write path:
      - translate (non-English input) with technical terms preserved
      - clean + embed
      - write embedding rows and their owner/document rows in ONE transaction

    A unit is either fully stored or not stored at all.
    """

    def __init__(
        self,
        *,
        store: KBVectorStore,
        embedder: KBEmbedder,
        translator: KBTranslator,
        chunker: Optional[KBChunker] = None,
        max_workers: Optional[int] = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.store = store
        self.embedder = embedder
        self.translator = translator
        self.chunker = chunker or KBChunker()
        self.max_workers = settings.INGEST_MAX_WORKERS if max_workers is None else max_workers
        self.logger = logger or get_class_logger(self.__class__)

        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")

    # ------------------------------------------------------------------
    # Single units
    # ------------------------------------------------------------------
    def save_single(
        self,
        content: str,
        content_type: str,
        metadata: Optional[Dict[str, Any]] = None,
        language: str = "en",
    ) -> int:
        """Store one standalone unit; returns the embedding id."""
        content = validate_content(content)
        content_type = validate_content_type(content_type)
        metadata = validate_metadata(metadata)
        language = validate_language(language)

        record = self._prepare_record(content, content_type, metadata, language)

        try:
            with self.store.transaction() as tx:
                embedding_id = tx.insert_embedding(record)
        except Exception as e:
            self.logger.error("Failed to save %s unit: %s", content_type, e, exc_info=True)
            raise

        self.logger.info(
            "Saved %s embedding id=%s (%s)",
            content_type,
            embedding_id,
            "translated" if record.was_translated else "original",
        )
        return embedding_id

    def save_unit_with_owner(self, content: str, owner: OwnerFields, language: str = "en") -> int:
        """
        Store an embedding plus its specialised owner row (prompt, documentation entry)
        atomically. The owner row keeps the untranslated text. Returns the owner id.
        """
        content = validate_content(content)
        content_type = validate_content_type(owner.content_type)
        language = validate_language(language)

        record = self._prepare_record(content, content_type, owner.metadata(), language)

        try:
            with self.store.transaction() as tx:
                embedding_id = tx.insert_embedding(record)
                owner_id = owner.write(tx, embedding_id, content)
        except Exception as e:
            self.logger.error("Failed to save %s with owner: %s", content_type, e, exc_info=True)
            raise

        self.logger.info("Saved %s id=%s (embedding id=%s)", type(owner).__name__, owner_id, embedding_id)
        return owner_id

    def save_prompt(
        self,
        prompt_text: str,
        user_session: str,
        project_id: Optional[str] = None,
        response_summary: Optional[str] = None,
        language: str = "en",
    ) -> int:
        if not isinstance(user_session, str) or not user_session.strip():
            raise ValidationError("user_session must be a non-empty string")
        owner = PromptOwner(
            user_session=user_session,
            project_id=project_id,
            response_summary=response_summary,
        )
        return self.save_unit_with_owner(prompt_text, owner, language)

    def save_documentation(
        self,
        content: str,
        doc_title: str,
        doc_url: Optional[str] = None,
        component: Optional[str] = None,
        doc_section: Optional[str] = None,
        language: str = "en",
    ) -> int:
        if not isinstance(doc_title, str) or not doc_title.strip():
            raise ValidationError("doc_title must be a non-empty string")
        owner = DocumentationOwner(
            doc_title=doc_title,
            doc_url=doc_url,
            component=component,
            doc_section=doc_section,
        )
        return self.save_unit_with_owner(content, owner, language)

    # ------------------------------------------------------------------
    # Long-form documents
    # ------------------------------------------------------------------
    def ingest_document(
        self,
        full_text: str,
        doc_metadata: DocumentMetadata,
        language: str = "en",
        max_words: Optional[int] = None,
        overlap_words: Optional[int] = None,
    ) -> IngestResult:
        full_text = validate_content(full_text, max_chars=settings.MAX_DOCUMENT_CHARS, field="full_text")
        language = validate_language(language)
        if not isinstance(doc_metadata, DocumentMetadata) or not (doc_metadata.title or "").strip():
            raise ValidationError("doc_metadata must be a DocumentMetadata with a non-empty title")
        max_words = self.chunker.max_words if max_words is None else max_words
        overlap_words = self.chunker.overlap_words if overlap_words is None else overlap_words
        validate_chunk_params(max_words, overlap_words)

        total_words = count_words(full_text)
        self.logger.info(
            "Ingesting document '%s': chars=%d words=%d language=%s",
            doc_metadata.title,
            len(full_text),
            total_words,
            language,
        )

        try:
            with self.store.transaction() as tx:
                chunks = self.chunker.split(full_text, max_words, overlap_words)
                prepared = self._prepare_chunks(chunks, language)
                vectors = self.embedder.embed_batch([p.content for p in prepared])

                doc_was_translated = any(p.translation.was_translated for p in prepared)
                document = self._document_record(full_text, doc_metadata, language, prepared, doc_was_translated)
                document_id = tx.insert_document(document)

                for p, vector in zip(prepared, vectors):
                    tx.insert_embedding(
                        EmbeddingRecord(
                            content=p.content,
                            vector=vector,
                            content_type="documentation",
                            metadata=self._chunk_metadata(
                                p, document_id, doc_metadata, len(prepared), language
                            ),
                            original_language=normalize_language(language),
                            was_translated=p.translation.was_translated,
                            document_id=document_id,
                            chunk_index=p.index,
                            chunk_total=len(prepared),
                        )
                    )

                tx.set_document_chunk_total(document_id, len(prepared))
        except Exception as e:
            self.logger.error("Document ingest '%s' rolled back: %s", doc_metadata.title, e, exc_info=True)
            raise

        self.logger.info(
            "Document '%s' stored: id=%s chunks=%d translated=%s",
            doc_metadata.title,
            document_id,
            len(prepared),
            doc_was_translated,
        )
        return IngestResult(
            document_id=document_id,
            chunks_created=len(prepared),
            total_words=total_words,
            was_translated=doc_was_translated,
            language=normalize_language(language),
        )

    def get_document(self, document_id: int) -> Optional[DocumentRecord]:
        return self.store.get_document(document_id)

    def get_document_chunks(self, document_id: int) -> List[EmbeddingRecord]:
        """Chunks of one document ordered by chunk_index (0..N-1)."""
        return self.store.get_document_chunks(document_id)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _translate(self, text: str, language: str) -> Optional[TranslationResult]:
        """None when the caller declared English: no translation attempted."""
        if normalize_language(language) == "en":
            return None
        result = self.translator.translate(text, language)
        if result.is_fallback:
            self.logger.warning("Storing untranslated text: %s", result.fallback_reason)
        return result

    def _prepare_record(
        self,
        content: str,
        content_type: str,
        metadata: Dict[str, Any],
        language: str,
    ) -> EmbeddingRecord:
        translation = self._translate(content, language)
        english = translation.translated_text if translation else content
        cleaned = clean_text_for_embedding(english)
        vector = self.embedder.embed(cleaned)

        was_translated = bool(translation and translation.was_translated)
        return EmbeddingRecord(
            content=cleaned,
            vector=vector,
            content_type=content_type,
            metadata=self._provenance_metadata(metadata, language, translation),
            original_language=normalize_language(language),
            was_translated=was_translated,
        )

    def _prepare_chunks(self, chunks: List[str], language: str) -> List[_PreparedChunk]:
        """Translate + clean every chunk concurrently; results come back in chunk order."""

        def prepare(index: int, chunk: str) -> _PreparedChunk:
            translation = self._translate(chunk, language) or TranslationResult.unchanged(chunk, "en")
            return _PreparedChunk(
                index=index,
                content=clean_text_for_embedding(translation.translated_text),
                translation=translation,
            )

        if normalize_language(language) == "en" or len(chunks) <= 1:
            return [prepare(i, c) for i, c in enumerate(chunks)]

        workers = min(self.max_workers, len(chunks))
        self.logger.debug("Preparing %d chunks on %d worker(s)", len(chunks), workers)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            # map() yields in submission order
            return list(pool.map(prepare, range(len(chunks)), chunks))

    @staticmethod
    def _provenance_metadata(
        metadata: Dict[str, Any],
        language: str,
        translation: Optional[TranslationResult],
    ) -> Dict[str, Any]:
        out = dict(metadata)
        out["originalLanguage"] = normalize_language(language)
        out["wasTranslated"] = bool(translation and translation.was_translated)
        if translation is not None:
            out.update(translation.provenance())
        return out

    def _chunk_metadata(
        self,
        prepared: _PreparedChunk,
        document_id: int,
        doc_metadata: DocumentMetadata,
        total_chunks: int,
        language: str,
    ) -> Dict[str, Any]:
        attempted = normalize_language(language) != "en"
        out: Dict[str, Any] = {
            "documentId": document_id,
            "documentTitle": doc_metadata.title,
            "chunkIndex": prepared.index,
            "totalChunks": total_chunks,
        }
        if doc_metadata.search_metadata is not None:
            out["searchMetadata"] = doc_metadata.search_metadata
        return self._provenance_metadata(out, language, prepared.translation if attempted else None)

    @staticmethod
    def _document_record(
        full_text: str,
        doc_metadata: DocumentMetadata,
        language: str,
        prepared: List[_PreparedChunk],
        was_translated: bool,
    ) -> DocumentRecord:
        metadata: Dict[str, Any] = {
            "originalLanguage": normalize_language(language),
            "wasTranslated": was_translated,
            "fileType": doc_metadata.file_type,
            "fileSize": len(full_text),
            "component": doc_metadata.component,
            **doc_metadata.extra,
        }
        if normalize_language(language) != "en":
            languages = Counter(p.translation.detected_language for p in prepared)
            metadata["detectedLanguage"] = languages.most_common(1)[0][0] if languages else "unknown"
            metadata["technicalTerms"] = sorted({t for p in prepared for t in p.translation.technical_terms})

        return DocumentRecord(
            doc_title=doc_metadata.title,
            doc_type=doc_metadata.doc_type,
            file_type=doc_metadata.file_type,
            file_size=len(full_text),
            component=doc_metadata.component,
            original_language=normalize_language(language),
            was_translated=was_translated,
            total_chunks=0,
            metadata=metadata,
        )
