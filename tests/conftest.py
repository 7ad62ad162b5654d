# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-12
# Updated: 2026-10-12
# Description: conftest.py
# -----------------------------------------------------------------------------

import sys
import uuid
from pathlib import Path

import chromadb
import pytest

# add project root to sys.path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from embedding.ChatEmbeddingSchema import (  # noqa: E402
    EMOTIONAL_FEATURE_DIMENSIONS,
    FEATURE_VECTOR_DIMENSIONS,
    LIGHTWEIGHT_DIMENSIONS,
    PRIMARY_DIMENSIONS,
    SEMANTIC_FEATURE_DIMENSIONS,
    TEMPORAL_FEATURE_DIMENSIONS,
    USER_FEATURE_DIMENSIONS,
)
from services.ChatEmbeddingService import ChatEmbeddingService  # noqa: E402
from vectorstore.ChromaChatEmbeddingStore import ChromaChatEmbeddingStore  # noqa: E402


def unit_vector(axis: int, size: int = PRIMARY_DIMENSIONS) -> list:
    """Mostly flat vector with a spike on `axis`; distinct axes give distinct directions."""
    vec = [0.01] * size
    vec[axis % size] = 1.0
    return vec


def make_payload(**overrides) -> dict:
    payload = {
        "user_id": str(uuid.uuid4()),
        "entry_id": str(uuid.uuid4()),
        "session_id": str(uuid.uuid4()),
        "message_content": "I finally finished the marathon today!",
        "message_type": "user_message",
        "conversation_context": "Talking about weekend plans",
        "primary_embedding": unit_vector(0),
        "lightweight_embedding": [0.1] * LIGHTWEIGHT_DIMENSIONS,
        "text_length": 38,
        "processing_time_ms": 12.5,
        "model_version": "emb-v1",
        "semantic_tags": ["running", "achievement"],
        "emotion_context": {
            "dominant_emotion": "joy",
            "intensity": 0.8,
            "emotions": {"joy": 0.8, "trust": 0.3},
        },
        "entities_mentioned": {"people": [], "locations": ["Boston"], "organizations": []},
        "feature_vector": [0.2] * FEATURE_VECTOR_DIMENSIONS,
        "temporal_features": [0.3] * TEMPORAL_FEATURE_DIMENSIONS,
        "emotional_features": [0.4] * EMOTIONAL_FEATURE_DIMENSIONS,
        "semantic_features": [0.5] * SEMANTIC_FEATURE_DIMENSIONS,
        "user_features": [0.6] * USER_FEATURE_DIMENSIONS,
        "feature_completeness": 0.9,
        "confidence_score": 0.75,
        "temporal_context": {"hour_of_day": 14, "day_of_week": 5, "is_weekend": True},
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def chroma_store() -> ChromaChatEmbeddingStore:
    # EphemeralClient shares one in-memory system per process; unique names keep tests apart
    client = chromadb.EphemeralClient()
    name = f"chat_emb_test_{uuid.uuid4().hex[:12]}"
    store = ChromaChatEmbeddingStore(client=client, collection_name=name)
    store.connect()
    yield store
    client.delete_collection(name)


@pytest.fixture
def embedding_service(chroma_store) -> ChatEmbeddingService:
    return ChatEmbeddingService(store=chroma_store, collection_name=chroma_store.collection_name)
