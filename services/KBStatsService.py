# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-26
# Description: KBStatsService.py
# -----------------------------------------------------------------------------

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from utility.logging_utils import get_class_logger
from vectorstore.KBVectorStore import KBVectorStore


@dataclass
class ContentGroupStats:
    content_type: str
    original_language: str
    was_translated: bool
    count: int
    avg_content_length: float


@dataclass
class KBStats:
    total_embeddings: int
    total_documents: int
    total_prompts: int
    total_documentation_entries: int
    distance_metric: str
    vector_dimension: int
    groups: List[ContentGroupStats] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalEmbeddings": self.total_embeddings,
            "totalDocuments": self.total_documents,
            "totalPrompts": self.total_prompts,
            "totalDocumentationEntries": self.total_documentation_entries,
            "distanceMetric": self.distance_metric,
            "vectorDimension": self.vector_dimension,
            "groups": [
                {
                    "contentType": g.content_type,
                    "originalLanguage": g.original_language,
                    "wasTranslated": g.was_translated,
                    "count": g.count,
                    "avgContentLength": g.avg_content_length,
                }
                for g in self.groups
            ],
        }


class KBStatsService:
    """
    Index statistics: totals plus counts and average content length grouped by
    (content_type, original_language, was_translated).
    """

    def __init__(self, *, store: KBVectorStore, logger: logging.Logger | None = None) -> None:
        self.store = store
        self.logger = logger or get_class_logger(self.__class__)

    def get_stats(self) -> KBStats:
        raw = self.store.stats()

        groups: List[ContentGroupStats] = []
        for g in raw.get("groups", []):
            if not isinstance(g, dict):
                continue
            groups.append(
                ContentGroupStats(
                    content_type=g.get("content_type"),
                    original_language=g.get("original_language"),
                    was_translated=bool(g.get("was_translated")),
                    count=int(g.get("count") or 0),
                    avg_content_length=round(float(g.get("avg_content_length") or 0.0), 1),
                )
            )

        stats = KBStats(
            total_embeddings=int(raw.get("total_embeddings") or 0),
            total_documents=int(raw.get("total_documents") or 0),
            total_prompts=int(raw.get("total_prompts") or 0),
            total_documentation_entries=int(raw.get("total_documentation_entries") or 0),
            distance_metric=getattr(self.store, "distance_metric", "cosine"),
            vector_dimension=getattr(self.store, "dimension", 0),
            groups=groups,
        )
        self.logger.info(
            "Stats: embeddings=%d documents=%d groups=%d",
            stats.total_embeddings,
            stats.total_documents,
            len(groups),
        )
        return stats
