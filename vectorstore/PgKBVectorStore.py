# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-23
# Description: PgKBVectorStore
# -----------------------------------------------------------------------------
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from sqlalchemy import create_engine, func, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.sql import Select

import settings
from config.Config import Config
from document.KBDocument import DocumentRecord
from document.OwnerRecords import DocumentationEntry, PromptRecord
from embedding.EmbeddingRecord import EmbeddingRecord
from errors import PersistenceError, ValidationError
from utility.logging_utils import get_class_logger
from vectorstore.KBTables import Base, KBDocumentationRow, KBDocumentRow, KBEmbeddingRow, KBPromptRow
from vectorstore.KBVectorStore import KBVectorStore, KBWriteTransaction

DISTANCE_METRICS = ("cosine", "l2")


def _embedding_to_record(row: KBEmbeddingRow) -> EmbeddingRecord:
    return EmbeddingRecord(
        id=row.id,
        content=row.content,
        vector=[float(x) for x in row.embedding],
        content_type=row.content_type,
        metadata=dict(row.meta or {}),
        original_language=row.original_language,
        was_translated=bool(row.was_translated),
        document_id=row.document_id,
        chunk_index=row.chunk_index,
        chunk_total=row.chunk_total,
        created_at=row.created_at,
    )


def _document_to_record(row: KBDocumentRow) -> DocumentRecord:
    return DocumentRecord(
        id=row.id,
        doc_title=row.doc_title,
        doc_type=row.doc_type,
        file_type=row.file_type,
        file_size=row.file_size,
        component=row.component,
        original_language=row.original_language,
        was_translated=bool(row.was_translated),
        total_chunks=row.total_chunks,
        metadata=dict(row.meta or {}),
        created_at=row.created_at,
    )


class SqlWriteTransaction(KBWriteTransaction):
    """
    Write handle bound to one Session inside session.begin().
    Every insert flushes so the store-assigned id is available immediately.
    """

    def __init__(self, session: Session, dimension: int):
        self.session = session
        self.dimension = dimension

    def _add(self, row: Any) -> int:
        self.session.add(row)
        self.session.flush()
        return row.id

    def insert_embedding(self, record: EmbeddingRecord) -> int:
        if len(record.vector) != self.dimension:
            raise ValidationError(
                f"Vector dimension {len(record.vector)} does not match store dimension {self.dimension}"
            )
        new_id = self._add(
            KBEmbeddingRow(
                content=record.content,
                embedding=list(record.vector),
                content_type=record.content_type,
                meta=dict(record.metadata or {}),
                original_language=record.original_language,
                was_translated=record.was_translated,
                document_id=record.document_id,
                chunk_index=record.chunk_index,
                chunk_total=record.chunk_total,
            )
        )
        record.id = new_id
        return new_id

    def insert_prompt(self, record: PromptRecord) -> int:
        new_id = self._add(
            KBPromptRow(
                embedding_id=record.embedding_id,
                user_session=record.user_session,
                prompt_text=record.prompt_text,
                project_id=record.project_id,
                response_summary=record.response_summary,
            )
        )
        record.id = new_id
        return new_id

    def insert_documentation_entry(self, record: DocumentationEntry) -> int:
        new_id = self._add(
            KBDocumentationRow(
                embedding_id=record.embedding_id,
                doc_title=record.doc_title,
                doc_url=record.doc_url,
                doc_section=record.doc_section,
                component=record.component,
                doc_type=record.doc_type,
                content_text=record.content_text,
            )
        )
        record.id = new_id
        return new_id

    def insert_document(self, record: DocumentRecord) -> int:
        new_id = self._add(
            KBDocumentRow(
                doc_title=record.doc_title,
                doc_type=record.doc_type,
                component=record.component,
                original_language=record.original_language,
                was_translated=record.was_translated,
                file_size=record.file_size,
                file_type=record.file_type,
                total_chunks=record.total_chunks,
                meta=dict(record.metadata or {}),
            )
        )
        record.id = new_id
        return new_id

    def set_document_chunk_total(self, document_id: int, total_chunks: int) -> None:
        row = self.session.get(KBDocumentRow, document_id)
        if row is None:
            raise PersistenceError(f"Document {document_id} does not exist")
        row.total_chunks = total_chunks
        self.session.flush()


class PgKBVectorStore(KBVectorStore):
    """
    PostgreSQL + pgvector store.

    Writes go through transaction(): one Session, one database transaction,
    committed on clean exit and rolled back on any exception. Database
    failures surface as PersistenceError after the rollback.
    """

    def __init__(
            self,
            cfg: Optional[Config] = None,
            *,
            engine: Optional[Engine] = None,
            dimension: Optional[int] = None,
            distance_metric: Optional[str] = None,
            logger=None,
    ):
        self.logger = logger or get_class_logger(self.__class__)
        self.dimension = settings.EMBEDDING_DIM if dimension is None else dimension
        self.distance_metric = (distance_metric or settings.DISTANCE_METRIC).lower()
        if self.distance_metric not in DISTANCE_METRICS:
            raise ValueError(f"distance_metric must be one of {DISTANCE_METRICS}, got {self.distance_metric!r}")

        if engine is None:
            if cfg is None:
                raise ValueError("PgKBVectorStore needs either cfg or engine")
            engine = create_engine(
                cfg.database_url,
                pool_size=settings.DB_POOL_SIZE,
                pool_timeout=settings.DB_POOL_TIMEOUT,
                pool_pre_ping=True,
            )
        self.engine = engine
        self.session_factory = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)

        self.logger.info(
            "Vector store ready: dialect=%s dim=%d metric=%s",
            self.engine.dialect.name,
            self.dimension,
            self.distance_metric,
        )

    # ------------------------------------------------------------------
    # Schema / health
    # ------------------------------------------------------------------
    def create_schema(self) -> None:
        """Create the pgvector extension (Postgres only) and all tables."""
        try:
            with self.engine.begin() as conn:
                if self.engine.dialect.name == "postgresql":
                    conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
                Base.metadata.create_all(bind=conn)
        except SQLAlchemyError as e:
            self.logger.error("Schema creation failed: %s", e, exc_info=True)
            raise PersistenceError("Schema creation failed") from e
        self.logger.info("Schema ready (%d tables)", len(Base.metadata.tables))

    def test_connection(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            self.logger.error("Database connection failed: %s", e)
            return False

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    @contextmanager
    def transaction(self) -> Iterator[SqlWriteTransaction]:
        session = self.session_factory()
        try:
            with session.begin():
                yield SqlWriteTransaction(session, self.dimension)
        except SQLAlchemyError as e:
            self.logger.error("Transaction rolled back: %s", e, exc_info=True)
            raise PersistenceError("Database write failed; transaction rolled back") from e
        finally:
            session.close()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def distance_expression(self, vector: Sequence[float]):
        column = KBEmbeddingRow.embedding
        if self.distance_metric == "l2":
            return column.l2_distance(list(vector))
        return column.cosine_distance(list(vector))

    def build_similarity_query(
            self,
            vector: Sequence[float],
            *,
            threshold: Optional[float],
            max_distance: Optional[float] = None,
            content_type: Optional[str] = None,
            limit: int = 10,
    ) -> Select:
        distance = self.distance_expression(vector).label("distance")
        stmt = select(KBEmbeddingRow, distance)
        if threshold is not None:
            stmt = stmt.where(distance <= threshold)
        if max_distance is not None:
            stmt = stmt.where(distance <= max_distance)
        if content_type is not None:
            stmt = stmt.where(KBEmbeddingRow.content_type == content_type)
        return stmt.order_by(distance.asc(), KBEmbeddingRow.id.asc()).limit(limit)

    def query_by_vector(
            self,
            vector: Sequence[float],
            *,
            threshold: Optional[float],
            max_distance: Optional[float] = None,
            content_type: Optional[str] = None,
            limit: int = 10,
    ) -> List[Tuple[EmbeddingRecord, float]]:
        if len(vector) != self.dimension:
            raise ValidationError(
                f"Query vector dimension {len(vector)} does not match store dimension {self.dimension}"
            )
        stmt = self.build_similarity_query(
            vector,
            threshold=threshold,
            max_distance=max_distance,
            content_type=content_type,
            limit=limit,
        )
        self.logger.debug(
            "Vector query: metric=%s threshold=%s max_distance=%s content_type=%s limit=%d",
            self.distance_metric,
            threshold,
            max_distance,
            content_type,
            limit,
        )
        try:
            with self.session_factory() as session:
                rows = session.execute(stmt).all()
                return [(_embedding_to_record(row), float(dist)) for row, dist in rows]
        except SQLAlchemyError as e:
            self.logger.error("Vector query failed: %s", e, exc_info=True)
            raise PersistenceError("Vector query failed") from e

    def get_document(self, document_id: int) -> Optional[DocumentRecord]:
        try:
            with self.session_factory() as session:
                row = session.get(KBDocumentRow, document_id)
                return _document_to_record(row) if row is not None else None
        except SQLAlchemyError as e:
            self.logger.error("Failed to load document %s: %s", document_id, e, exc_info=True)
            raise PersistenceError(f"Failed to load document {document_id}") from e

    def get_document_chunks(self, document_id: int) -> List[EmbeddingRecord]:
        stmt = (
            select(KBEmbeddingRow)
            .where(KBEmbeddingRow.document_id == document_id)
            .order_by(KBEmbeddingRow.chunk_index.asc())
        )
        try:
            with self.session_factory() as session:
                return [_embedding_to_record(r) for r in session.scalars(stmt).all()]
        except SQLAlchemyError as e:
            self.logger.error("Failed to load chunks for document %s: %s", document_id, e, exc_info=True)
            raise PersistenceError(f"Failed to load chunks for document {document_id}") from e

    def stats(self) -> Dict[str, Any]:
        grouped = (
            select(
                KBEmbeddingRow.content_type,
                KBEmbeddingRow.original_language,
                KBEmbeddingRow.was_translated,
                func.count(KBEmbeddingRow.id),
                func.avg(func.length(KBEmbeddingRow.content)),
            )
            .group_by(
                KBEmbeddingRow.content_type,
                KBEmbeddingRow.original_language,
                KBEmbeddingRow.was_translated,
            )
            .order_by(KBEmbeddingRow.content_type, KBEmbeddingRow.original_language)
        )
        try:
            with self.session_factory() as session:
                return {
                    "total_embeddings": session.scalar(select(func.count(KBEmbeddingRow.id))) or 0,
                    "total_documents": session.scalar(select(func.count(KBDocumentRow.id))) or 0,
                    "total_prompts": session.scalar(select(func.count(KBPromptRow.id))) or 0,
                    "total_documentation_entries": session.scalar(select(func.count(KBDocumentationRow.id))) or 0,
                    "groups": [
                        {
                            "content_type": ct,
                            "original_language": lang,
                            "was_translated": bool(translated),
                            "count": int(count),
                            "avg_content_length": float(avg_len or 0.0),
                        }
                        for ct, lang, translated, count, avg_len in session.execute(grouped).all()
                    ],
                }
        except SQLAlchemyError as e:
            self.logger.error("Failed to compute stats: %s", e, exc_info=True)
            raise PersistenceError("Failed to compute stats") from e
