# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-22
# Description: KBVectorStore
# -----------------------------------------------------------------------------

from typing import Any, ContextManager, Dict, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

from document.KBDocument import DocumentRecord
from document.OwnerRecords import DocumentationEntry, PromptRecord
from embedding.EmbeddingRecord import EmbeddingRecord


@runtime_checkable
class KBWriteTransaction(Protocol):
    """Writes issued between transaction() enter and exit commit or roll back together."""

    def insert_embedding(self, record: EmbeddingRecord) -> int:
        ...

    def insert_prompt(self, record: PromptRecord) -> int:
        ...

    def insert_documentation_entry(self, record: DocumentationEntry) -> int:
        ...

    def insert_document(self, record: DocumentRecord) -> int:
        ...

    def set_document_chunk_total(self, document_id: int, total_chunks: int) -> None:
        ...


@runtime_checkable
class KBVectorStore(Protocol):
    dimension: int
    distance_metric: str

    def test_connection(self) -> bool:
        ...

    def create_schema(self) -> None:
        ...

    def transaction(self) -> ContextManager[KBWriteTransaction]:
        ...

    def query_by_vector(
            self,
            vector: Sequence[float],
            *,
            threshold: Optional[float],
            max_distance: Optional[float] = None,
            content_type: Optional[str] = None,
            limit: int = 10,
    ) -> List[Tuple[EmbeddingRecord, float]]:
        ...

    def get_document(self, document_id: int) -> Optional[DocumentRecord]:
        ...

    def get_document_chunks(self, document_id: int) -> List[EmbeddingRecord]:
        ...

    def stats(self) -> Dict[str, Any]:
        ...
