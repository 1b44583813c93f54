# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-22
# Description: SearchResults
# -----------------------------------------------------------------------------
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


def similarity_from_distance(distance: float) -> float:
    """Display score only; ranking is always by distance."""
    return max(0.0, 1.0 - float(distance))


@dataclass
class SearchHit:
    id: int
    content: str
    content_type: str
    metadata: Dict[str, Any]
    distance: float
    similarity: float
    created_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, row: Any, distance: float) -> "SearchHit":
        return cls(
            id=row.id,
            content=row.content,
            content_type=row.content_type,
            metadata=dict(row.metadata or {}),
            distance=float(distance),
            similarity=similarity_from_distance(distance),
            created_at=row.created_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content,
            "contentType": self.content_type,
            "metadata": self.metadata,
            "distance": self.distance,
            "similarity": self.similarity,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass
class SearchResponse:
    query: str
    search_query: str
    results: List[SearchHit] = field(default_factory=list)
    threshold: Optional[float] = None
    was_translated: bool = False
    detected_language: str = "en"

    @property
    def total(self) -> int:
        return len(self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "searchQuery": self.search_query,
            "threshold": self.threshold,
            "wasTranslated": self.was_translated,
            "detectedLanguage": self.detected_language,
            "total": self.total,
            "results": [h.to_dict() for h in self.results],
        }


@dataclass
class ProgressiveSearchResponse(SearchResponse):
    """used_threshold is None when no tested threshold matched anything."""

    used_threshold: Optional[float] = None
    tested_thresholds: List[float] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["usedThreshold"] = self.used_threshold
        d["testedThresholds"] = list(self.tested_thresholds)
        return d


@dataclass
class DebugDistanceResponse:
    query: str
    search_query: str
    vector_dimension: int
    results: List[SearchHit] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "searchQuery": self.search_query,
            "vectorDimension": self.vector_dimension,
            "results": [h.to_dict() for h in self.results],
        }
