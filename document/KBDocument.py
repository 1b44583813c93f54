# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-21
# Description: KBDocument
# -----------------------------------------------------------------------------
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class DocumentMetadata:
    """Caller-supplied description of an uploaded document."""

    title: str
    doc_type: str = "uploaded"
    file_type: str = "txt"
    component: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def search_metadata(self) -> Optional[Dict[str, Any]]:
        sm = self.extra.get("searchMetadata")
        return sm if isinstance(sm, dict) else None


@dataclass
class DocumentRecord:
    """
    One uploaded document. Owns N chunk EmbeddingRecords via document_id.
    Never holds the raw text; total_chunks is 0 until every chunk is written.
    """

    doc_title: str
    doc_type: str
    file_type: str
    file_size: int
    component: Optional[str] = None
    original_language: str = "en"
    was_translated: bool = False
    total_chunks: int = 0
    metadata: Dict[str, Any] = field(default_factory=dict)

    id: Optional[int] = None
    created_at: Optional[datetime] = None
