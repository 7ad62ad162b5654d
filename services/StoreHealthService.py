# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-10-08
# Description: StoreHealthService.py
# -----------------------------------------------------------------------------
from dataclasses import dataclass

from api.schemas.health import DeepHealthResponse
from vectorstore.ChatEmbeddingStore import ChatEmbeddingStore


@dataclass
class StoreHealthService:
    """
    Wraps the document store health check.
    Returns DeepHealthResponse for API layer
    """

    store: ChatEmbeddingStore

    def deep_health(self) -> DeepHealthResponse:
        result = self.store.health_check()

        return DeepHealthResponse(
            status="ok" if result.get("status") == "healthy" else "error",
            store=result,
        )
