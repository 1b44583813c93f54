# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-20
# Description: EmbeddingRecord
# -----------------------------------------------------------------------------
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class EmbeddingRecord:
    """
    The atomic indexed unit: English content + vector + searchable metadata.
    document_id/chunk_index/chunk_total are set only for chunks of an uploaded document.
    """

    content: str
    vector: List[float]
    content_type: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    original_language: str = "en"
    was_translated: bool = False

    document_id: Optional[int] = None
    chunk_index: Optional[int] = None
    chunk_total: Optional[int] = None

    # Assigned by the store
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def is_chunk(self) -> bool:
        return self.document_id is not None
