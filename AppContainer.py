# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-28
# Description: AppContainer.py
# -----------------------------------------------------------------------------
from functools import lru_cache
from typing import Optional

import settings
from chat.OpenAIChat import OpenAIChat
from chunking.KBChunker import KBChunker
from config.Config import Config
from embedding.KBEmbedder import KBEmbedder
from health.ChatHealth import ChatHealth
from health.DatabaseHealth import DatabaseHealth
from health.EmbeddingHealth import EmbeddingHealth
from health.TestRunner import TestRunner
from services.KBIngestService import KBIngestService
from services.KBSearchService import KBSearchService
from services.KBStatsService import KBStatsService
from translation.KBTranslator import KBTranslator
from translation.LangDetectDetector import LangDetectDetector
from utility.logging_utils import get_class_logger
from vectorstore.PgKBVectorStore import PgKBVectorStore


class AppContainer:
    """
    Owns heavy object instantiation and application wiring.
    Everything is built once here and injected; services never build their own clients.
    """

    def __init__(self, cfg: Optional[Config] = None, *, create_schema: Optional[bool] = None) -> None:
        self.logger = get_class_logger(self.__class__)

        # Configuration
        self.cfg = cfg or Config.from_env()
        self.logger.info("Config: %s", self.cfg.summary())

        # Core infrastructure
        self.openai_chat = OpenAIChat(cfg=self.cfg)
        self.embedder = KBEmbedder(cfg=self.cfg)
        self.store = PgKBVectorStore(cfg=self.cfg)

        if create_schema is None:
            create_schema = settings.CREATE_SCHEMA_ON_START
        if create_schema:
            self.store.create_schema()

        # Translation + chunking
        self.lang_detector = LangDetectDetector()
        self.translator = KBTranslator(self.openai_chat, detector=self.lang_detector)
        self.chunker = KBChunker()

        # Services
        self.ingest_service = KBIngestService(
            store=self.store,
            embedder=self.embedder,
            translator=self.translator,
            chunker=self.chunker,
        )
        self.search_service = KBSearchService(
            store=self.store,
            embedder=self.embedder,
            translator=self.translator,
        )
        self.stats_service = KBStatsService(store=self.store)

        # Smoke tests / health
        self.test_runner = TestRunner(
            database_health=DatabaseHealth(self.store),
            embedding_health=EmbeddingHealth(self.embedder),
            chat_health=ChatHealth(self.openai_chat),
        )


@lru_cache
def get_app_container() -> AppContainer:
    # built on first use
    return AppContainer()
