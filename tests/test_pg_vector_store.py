# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-03
# Description: test_pg_vector_store.py
# -----------------------------------------------------------------------------
"""
Runs the SQLAlchemy store against in-memory SQLite for transactional
behaviour; the pgvector distance SQL is checked by compiling against the
PostgreSQL dialect.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.dialects import postgresql
from sqlalchemy.pool import StaticPool

import settings
from document.KBDocument import DocumentRecord
from document.OwnerRecords import PromptRecord
from embedding.EmbeddingRecord import EmbeddingRecord
from errors import PersistenceError, ValidationError
from services.KBStatsService import KBStatsService
from vectorstore.PgKBVectorStore import PgKBVectorStore

DIM = settings.EMBEDDING_DIM


def _vec(hot: int = 0, value: float = 1.0):
    v = [0.0] * DIM
    v[hot] = value
    return v


def _record(content="text", content_type="prompt", **kw) -> EmbeddingRecord:
    return EmbeddingRecord(content=content, vector=kw.pop("vector", _vec()), content_type=content_type, **kw)


@pytest.fixture
def sqlite_store() -> PgKBVectorStore:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    store = PgKBVectorStore(engine=engine)
    store.create_schema()
    return store


def test_connection_and_schema(sqlite_store):
    assert sqlite_store.test_connection() is True
    assert sqlite_store.stats()["total_embeddings"] == 0


def test_committed_transaction_persists_embedding_and_owner(sqlite_store):
    with sqlite_store.transaction() as tx:
        emb_id = tx.insert_embedding(_record("hello", metadata={"originalLanguage": "en"}))
        prompt_id = tx.insert_prompt(PromptRecord(embedding_id=emb_id, user_session="s", prompt_text="olá"))

    assert isinstance(emb_id, int)
    assert isinstance(prompt_id, int)
    stats = sqlite_store.stats()
    assert stats["total_embeddings"] == 1
    assert stats["total_prompts"] == 1


def test_exception_inside_transaction_rolls_back_everything(sqlite_store):
    with pytest.raises(RuntimeError):
        with sqlite_store.transaction() as tx:
            tx.insert_embedding(_record("first"))
            tx.insert_embedding(_record("second"))
            raise RuntimeError("embedding service went away")

    assert sqlite_store.stats()["total_embeddings"] == 0


def test_database_error_becomes_persistence_error_and_rolls_back(sqlite_store):
    with pytest.raises(PersistenceError):
        with sqlite_store.transaction() as tx:
            tx.insert_embedding(_record("orphan"))
            # embedding_id is NOT NULL
            tx.insert_prompt(PromptRecord(embedding_id=None, user_session="s", prompt_text="x"))

    assert sqlite_store.stats()["total_embeddings"] == 0


def test_wrong_vector_dimension_rejected(sqlite_store):
    with pytest.raises(ValidationError):
        with sqlite_store.transaction() as tx:
            tx.insert_embedding(_record(vector=[0.1, 0.2]))

    with pytest.raises(ValidationError):
        sqlite_store.query_by_vector([0.1, 0.2], threshold=1.0)


def test_document_chunks_are_returned_in_index_order(sqlite_store):
    with sqlite_store.transaction() as tx:
        doc_id = tx.insert_document(
            DocumentRecord(doc_title="Guide", doc_type="uploaded", file_type="txt", file_size=42)
        )
        for idx in (2, 0, 1):
            tx.insert_embedding(
                _record(
                    f"chunk {idx}",
                    content_type="documentation",
                    vector=_vec(idx, 0.5),
                    document_id=doc_id,
                    chunk_index=idx,
                    chunk_total=3,
                )
            )
        tx.set_document_chunk_total(doc_id, 3)

    chunks = sqlite_store.get_document_chunks(doc_id)
    assert [c.chunk_index for c in chunks] == [0, 1, 2]
    assert [c.content for c in chunks] == ["chunk 0", "chunk 1", "chunk 2"]
    assert chunks[1].vector[1] == pytest.approx(0.5)
    assert len(chunks[0].vector) == DIM

    doc = sqlite_store.get_document(doc_id)
    assert doc.total_chunks == 3
    assert doc.doc_title == "Guide"
    assert sqlite_store.get_document(doc_id + 999) is None


def test_chunk_total_for_missing_document_fails(sqlite_store):
    with pytest.raises(PersistenceError):
        with sqlite_store.transaction() as tx:
            tx.set_document_chunk_total(12345, 3)


def test_stats_grouping(sqlite_store):
    with sqlite_store.transaction() as tx:
        tx.insert_embedding(_record("abcd", "prompt", original_language="pt", was_translated=True))
        tx.insert_embedding(_record("abcdef", "prompt", original_language="pt", was_translated=True))
        tx.insert_embedding(_record("xy", "template"))

    stats = KBStatsService(store=sqlite_store).get_stats()

    assert stats.total_embeddings == 3
    groups = {(g.content_type, g.original_language, g.was_translated): g for g in stats.groups}
    pt = groups[("prompt", "pt", True)]
    assert pt.count == 2
    assert pt.avg_content_length == pytest.approx(5.0)
    assert groups[("template", "en", False)].count == 1
    assert stats.to_dict()["vectorDimension"] == DIM


@pytest.mark.parametrize("metric,operator", [("cosine", "<=>"), ("l2", "<->")])
def test_similarity_query_uses_pgvector_operator(metric, operator):
    engine = create_engine("sqlite://", poolclass=StaticPool)
    store = PgKBVectorStore(engine=engine, distance_metric=metric)

    stmt = store.build_similarity_query(
        _vec(),
        threshold=1.5,
        max_distance=0.8,
        content_type="prompt",
        limit=5,
    )
    sql = str(stmt.compile(dialect=postgresql.dialect()))

    assert operator in sql
    assert "ORDER BY distance ASC" in sql
    assert "kb_embeddings.content_type" in sql
    assert "LIMIT" in sql


def test_similarity_query_without_threshold_has_no_where_clause():
    store = PgKBVectorStore(engine=create_engine("sqlite://", poolclass=StaticPool))
    sql = str(store.build_similarity_query(_vec(), threshold=None).compile(dialect=postgresql.dialect()))
    assert "WHERE" not in sql


def test_unknown_metric_rejected():
    with pytest.raises(ValueError):
        PgKBVectorStore(engine=create_engine("sqlite://", poolclass=StaticPool), distance_metric="dot")
