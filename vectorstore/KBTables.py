# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-23
# Description: KBTables
# -----------------------------------------------------------------------------
from datetime import datetime, timezone

from pgvector.sqlalchemy import Vector
from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base

import settings

Base = declarative_base()

# JSONB on Postgres, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class KBEmbeddingRow(Base):
    __tablename__ = "kb_embeddings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    content = Column(Text, nullable=False)
    embedding = Column(Vector(settings.EMBEDDING_DIM), nullable=False)
    content_type = Column(String(32), nullable=False, index=True)
    # "metadata" is reserved on declarative classes
    meta = Column("metadata", JSONType, nullable=False, default=dict)
    original_language = Column(String(16), nullable=False, default="en")
    was_translated = Column(Boolean, nullable=False, default=False)
    document_id = Column(Integer, ForeignKey("kb_documents.id"), nullable=True, index=True)
    chunk_index = Column(Integer, nullable=True)
    chunk_total = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        Index("ix_kb_embeddings_document_chunk", "document_id", "chunk_index", unique=True),
    )


class KBDocumentRow(Base):
    __tablename__ = "kb_documents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    doc_title = Column(Text, nullable=False)
    doc_type = Column(String(64), nullable=False, default="uploaded")
    component = Column(String(128), nullable=True)
    original_language = Column(String(16), nullable=False, default="en")
    was_translated = Column(Boolean, nullable=False, default=False)
    file_size = Column(Integer, nullable=False, default=0)
    file_type = Column(String(32), nullable=False, default="txt")
    total_chunks = Column(Integer, nullable=False, default=0)
    meta = Column("metadata", JSONType, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class KBPromptRow(Base):
    __tablename__ = "kb_prompts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    embedding_id = Column(Integer, ForeignKey("kb_embeddings.id"), nullable=False, unique=True)
    user_session = Column(String(128), nullable=False, index=True)
    prompt_text = Column(Text, nullable=False)
    project_id = Column(String(128), nullable=True, index=True)
    response_summary = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class KBDocumentationRow(Base):
    __tablename__ = "kb_documentation_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    embedding_id = Column(Integer, ForeignKey("kb_embeddings.id"), nullable=False, unique=True)
    doc_title = Column(Text, nullable=False)
    doc_url = Column(Text, nullable=True)
    doc_section = Column(Text, nullable=True)
    component = Column(String(128), nullable=True)
    doc_type = Column(String(64), nullable=False, default="official")
    content_text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
