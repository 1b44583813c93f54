# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-29
# Description: conftest.py
# -----------------------------------------------------------------------------

import copy
import json
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import numpy as np
import pytest

# add project root to sys.path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from document.KBDocument import DocumentRecord  # noqa: E402
from document.OwnerRecords import DocumentationEntry, PromptRecord  # noqa: E402
from embedding.EmbeddingRecord import EmbeddingRecord  # noqa: E402
from errors import EmbeddingError, PersistenceError, ValidationError  # noqa: E402
from translation.KBTranslator import KBTranslator  # noqa: E402


# -----------------------------------------------------------------------------
# Fakes
# -----------------------------------------------------------------------------
class FakeChatClient:
    """Stands in for OpenAIChat.json_chat; `reply` is a string or a callable(user_text) -> str."""

    def __init__(self, reply: Any = None, error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def json_chat(self, user_text: str, system_text: str, **kwargs: Any) -> str:
        self.calls.append({"user_text": user_text, "system_text": system_text, **kwargs})
        if self.error is not None:
            raise self.error
        if callable(self.reply):
            return self.reply(user_text)
        return self.reply

    def healthcheck(self) -> bool:
        return self.error is None


def masked_input(user_text: str) -> str:
    """Pull the masked text back out of the translator's payload."""
    return json.loads(user_text.split("INPUT:\n", 1)[1])


def portuguese_reply(user_text: str) -> str:
    """Pretend every input is Portuguese and 'translate' it by prefixing EN:."""
    return json.dumps({
        "detectedLanguage": "pt",
        "translatedText": "EN: " + masked_input(user_text),
        "wasTranslated": True,
        "technicalTerms": [],
    })


class FixedDetector:
    def __init__(self, lang: str = "und", prob: float = 0.0):
        self.lang = lang
        self.prob = prob

    def detect(self, text: str):
        return self.lang, self.prob


class FakeEmbedder:
    """
    Maps known texts to fixed vectors; anything else gets `default`.
    Counts calls so tests can assert "embedded exactly once".
    """

    def __init__(self, vectors: Optional[Dict[str, List[float]]] = None, default=None, dimensions: int = 2):
        self.vectors = vectors or {}
        self.default = default or [1.0, 0.0]
        self.dimensions = dimensions
        self.model = "fake-embed"
        self.calls: List[List[str]] = []
        self.error: Optional[Exception] = None

    def embed(self, text: str) -> List[float]:
        return self.embed_batch([text])[0]

    def embed_batch(self, texts: List[str]) -> List[List[float]]:
        self.calls.append(list(texts))
        if self.error is not None:
            raise self.error
        if any(not (t or "").strip() for t in texts):
            raise ValidationError("Cannot embed empty text")
        return [list(self.vectors.get(t, self.default)) for t in texts]

    @property
    def call_count(self) -> int:
        return len(self.calls)


class InMemoryTransaction:
    def __init__(self, store: "InMemoryKBStore"):
        self.store = store

    def insert_embedding(self, record: EmbeddingRecord) -> int:
        store = self.store
        if store.fail_after_embeddings is not None and store.embedding_inserts >= store.fail_after_embeddings:
            raise PersistenceError("simulated write failure")
        if len(record.vector) != store.dimension:
            raise ValidationError("dimension mismatch")
        store.embedding_inserts += 1
        new_id = store.next_id()
        store.embeddings[new_id] = copy.deepcopy(record)
        store.embeddings[new_id].id = new_id
        return new_id

    def insert_prompt(self, record: PromptRecord) -> int:
        new_id = self.store.next_id()
        record.id = new_id
        self.store.prompts[new_id] = copy.deepcopy(record)
        return new_id

    def insert_documentation_entry(self, record: DocumentationEntry) -> int:
        new_id = self.store.next_id()
        record.id = new_id
        self.store.documentation_entries[new_id] = copy.deepcopy(record)
        return new_id

    def insert_document(self, record: DocumentRecord) -> int:
        new_id = self.store.next_id()
        record.id = new_id
        self.store.documents[new_id] = copy.deepcopy(record)
        return new_id

    def set_document_chunk_total(self, document_id: int, total_chunks: int) -> None:
        self.store.documents[document_id].total_chunks = total_chunks


class InMemoryKBStore:
    """Transactional in-memory store; L2 distance over numpy arrays."""

    _STATE = ("embeddings", "documents", "prompts", "documentation_entries", "_next_id")

    def __init__(self, dimension: int = 2):
        self.dimension = dimension
        self.distance_metric = "l2"
        self.embeddings: Dict[int, EmbeddingRecord] = {}
        self.documents: Dict[int, DocumentRecord] = {}
        self.prompts: Dict[int, PromptRecord] = {}
        self.documentation_entries: Dict[int, DocumentationEntry] = {}
        self._next_id = 0
        self.fail_after_embeddings: Optional[int] = None
        self.embedding_inserts = 0
        self.queries: List[Dict[str, Any]] = []

    def next_id(self) -> int:
        self._next_id += 1
        return self._next_id

    @contextmanager
    def transaction(self):
        snapshot = {k: copy.deepcopy(getattr(self, k)) for k in self._STATE}
        try:
            yield InMemoryTransaction(self)
        except Exception:
            for k, v in snapshot.items():
                setattr(self, k, v)
            raise

    def add(self, content: str, vector: List[float], content_type: str = "documentation") -> int:
        with self.transaction() as tx:
            return tx.insert_embedding(EmbeddingRecord(content=content, vector=vector, content_type=content_type))

    def query_by_vector(self, vector, *, threshold, max_distance=None, content_type=None, limit=10):
        self.queries.append({"threshold": threshold, "max_distance": max_distance, "content_type": content_type})
        q = np.asarray(vector, dtype=float)
        scored = []
        for rec in self.embeddings.values():
            if content_type is not None and rec.content_type != content_type:
                continue
            d = float(np.linalg.norm(np.asarray(rec.vector, dtype=float) - q))
            if threshold is not None and d > threshold:
                continue
            if max_distance is not None and d > max_distance:
                continue
            scored.append((rec, d))
        scored.sort(key=lambda rd: (rd[1], rd[0].id))
        return scored[:limit]

    def get_document(self, document_id: int):
        return self.documents.get(document_id)

    def get_document_chunks(self, document_id: int):
        rows = [r for r in self.embeddings.values() if r.document_id == document_id]
        return sorted(rows, key=lambda r: r.chunk_index)

    def stats(self):
        return {
            "total_embeddings": len(self.embeddings),
            "total_documents": len(self.documents),
            "total_prompts": len(self.prompts),
            "total_documentation_entries": len(self.documentation_entries),
            "groups": [],
        }

    def test_connection(self) -> bool:
        return True


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def store() -> InMemoryKBStore:
    return InMemoryKBStore()


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def chat_client() -> FakeChatClient:
    return FakeChatClient(reply=portuguese_reply)


@pytest.fixture
def make_translator() -> Callable[..., KBTranslator]:
    def _make(chat: Any, detector: Any = None) -> KBTranslator:
        return KBTranslator(chat, detector=detector or FixedDetector())

    return _make


@pytest.fixture
def translator(chat_client, make_translator) -> KBTranslator:
    return make_translator(chat_client)


@pytest.fixture
def failing_embedder() -> FakeEmbedder:
    fe = FakeEmbedder()
    fe.error = EmbeddingError("quota exceeded")
    return fe
