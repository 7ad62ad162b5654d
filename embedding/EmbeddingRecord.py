# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-29
# Description: EmbeddingRecord
# -----------------------------------------------------------------------------
from typing import Any, Dict, Iterable, Optional, Tuple

# Store-side slots. The primary embedding lives in the vector slot so the
# store can rank against it; the id lives in the document key slot.
ID_SLOT = "_id"
VECTOR_SLOT = "$vector"
SIMILARITY_SLOT = "$similarity"

# Public field order of a chat embedding record
RECORD_FIELDS: Tuple[str, ...] = (
    "id",
    "user_id",
    "entry_id",
    "message_content",
    "message_type",
    "timestamp",
    "session_id",
    "conversation_context",
    "primary_embedding",
    "lightweight_embedding",
    "text_length",
    "processing_time_ms",
    "model_version",
    "semantic_tags",
    "emotion_context",
    "entities_mentioned",
    "feature_vector",
    "temporal_features",
    "emotional_features",
    "semantic_features",
    "user_features",
    "feature_completeness",
    "confidence_score",
    "temporal_context",
    "created_at",
    "updated_at",
)

# Paginated listings leave out the two embeddings
LIST_FIELDS: Tuple[str, ...] = tuple(
    f for f in RECORD_FIELDS if f not in ("primary_embedding", "lightweight_embedding")
)

# Batch create echoes only a short summary of each inserted document
BATCH_SUMMARY_FIELDS: Tuple[str, ...] = (
    "id",
    "user_id",
    "entry_id",
    "message_content",
    "message_type",
    "timestamp",
    "session_id",
)

EMPTY_ENTITIES = {"people": [], "locations": [], "organizations": []}


def to_store_document(
        record_id: str,
        fields: Dict[str, Any],
        *,
        timestamp: str,
        created_at: str,
        updated_at: str,
) -> Dict[str, Any]:
    """
    Build the store document for validated, JSON-ready record fields.
    Identity and time fields are always taken from the arguments.
    """
    body = dict(fields)
    vector = body.pop("primary_embedding")
    body.pop("id", None)

    document: Dict[str, Any] = {ID_SLOT: record_id}
    for name in RECORD_FIELDS:
        if name in ("id", "primary_embedding", "timestamp", "created_at", "updated_at"):
            continue
        document[name] = body.get(name)

    if document.get("semantic_tags") is None:
        document["semantic_tags"] = []
    if document.get("entities_mentioned") is None:
        document["entities_mentioned"] = {k: list(v) for k, v in EMPTY_ENTITIES.items()}

    document[VECTOR_SLOT] = vector
    document["timestamp"] = timestamp
    document["created_at"] = created_at
    document["updated_at"] = updated_at
    return document


def to_record(
        document: Dict[str, Any],
        fields: Iterable[str] = RECORD_FIELDS,
        *,
        with_similarity: bool = False,
) -> Dict[str, Any]:
    """Map a store document back to the public record shape."""
    record: Dict[str, Any] = {}
    for name in fields:
        if name == "id":
            record["id"] = document.get(ID_SLOT)
        elif name == "primary_embedding":
            record["primary_embedding"] = document.get(VECTOR_SLOT)
        else:
            record[name] = document.get(name)

    if with_similarity:
        record["similarity_score"] = similarity_of(document)
    return record


def similarity_of(document: Dict[str, Any]) -> Optional[float]:
    score = document.get(SIMILARITY_SLOT)
    return float(score) if score is not None else None
