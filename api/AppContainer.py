# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-10-08
# Description: AppContainer.py
# -----------------------------------------------------------------------------
from typing import Optional

import settings
from config.Config import Config
from services.ChatEmbeddingService import ChatEmbeddingService
from services.SessionCleanupService import SessionCleanupService
from services.StoreHealthService import StoreHealthService
from utility.logging_utils import get_class_logger
from vectorstore.ChatEmbeddingStore import ChatEmbeddingStore
from vectorstore.ChromaChatEmbeddingStore import ChromaChatEmbeddingStore


class AppContainer:
    """
    Owns object instantiation and application wiring.
    The store handle is created here once and injected into every service;
    pass `store` to run the API against another backend (tests do).
    """

    def __init__(self, *, store: Optional[ChatEmbeddingStore] = None, cfg: Optional[Config] = None) -> None:
        self.logger = get_class_logger(self.__class__)
        self.collection_name = settings.CHAT_EMBEDDINGS_COLLECTION

        # Core infrastructure
        if store is None:
            self.cfg = cfg or Config.from_env()
            store = ChromaChatEmbeddingStore(cfg=self.cfg, collection_name=self.collection_name)
        else:
            self.cfg = cfg
        self.store = store

        if settings.EAGER_CONNECT and isinstance(self.store, ChromaChatEmbeddingStore):
            self.store.connect()

        self.embedding_service = ChatEmbeddingService(
            store=self.store,
            collection_name=self.collection_name,
        )

        self.session_cleanup_service = SessionCleanupService(
            embedding_service=self.embedding_service,
            max_records=settings.SESSION_CLEANUP_LIMIT,
        )

        self.health_service = StoreHealthService(store=self.store)

        self.logger.info("AppContainer initialised (store=%s, collection=%s)",
                         type(self.store).__name__, self.collection_name)
