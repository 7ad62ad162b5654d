# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-11
# Description: test_chat_embedding_service.py
# -----------------------------------------------------------------------------
import uuid
from unittest.mock import MagicMock

import pytest

from conftest import make_payload, unit_vector
from embedding.ChatEmbeddingSchema import PRIMARY_DIMENSIONS
from embedding.errors import NotFoundError, PersistenceError, ValidationError
from embedding.validation import validate_create
from services.ChatEmbeddingService import ChatEmbeddingService
from vectorstore.ChatEmbeddingStore import ChatEmbeddingStore


@pytest.fixture
def mock_store():
    return MagicMock(spec=ChatEmbeddingStore)


# -----------------------------------------------------------------------------
# Create / read
# -----------------------------------------------------------------------------
def test_create_returns_full_record(embedding_service):
    record = embedding_service.create(make_payload())

    uuid.UUID(record["id"])
    assert record["timestamp"] == record["created_at"] == record["updated_at"]
    assert len(record["primary_embedding"]) == PRIMARY_DIMENSIONS
    assert record["semantic_tags"] == ["running", "achievement"]

    fetched = embedding_service.get_by_id(record["id"])
    assert fetched == record


def test_create_ignores_client_id_and_timestamps(embedding_service):
    record = embedding_service.create(
        make_payload(id="client-id", timestamp="2000-01-01T00:00:00Z", created_at="2000-01-01T00:00:00Z")
    )
    assert record["id"] != "client-id"
    assert not record["timestamp"].startswith("2000")
    assert not record["created_at"].startswith("2000")


@pytest.mark.parametrize("size", [PRIMARY_DIMENSIONS - 1, PRIMARY_DIMENSIONS + 1])
def test_invalid_vector_never_reaches_store(mock_store, size):
    service = ChatEmbeddingService(store=mock_store)
    with pytest.raises(ValidationError):
        service.create(make_payload(primary_embedding=[0.1] * size))
    assert mock_store.method_calls == []


def test_get_missing_raises_not_found(embedding_service):
    with pytest.raises(NotFoundError) as exc:
        embedding_service.get_by_id(str(uuid.uuid4()))
    assert str(exc.value) == "Chat embedding not found"


def test_store_failure_becomes_persistence_error(mock_store):
    mock_store.insert_one.side_effect = ConnectionError("socket closed")
    service = ChatEmbeddingService(store=mock_store)

    with pytest.raises(PersistenceError) as exc:
        service.create(make_payload())
    assert "socket closed" in str(exc.value)


# -----------------------------------------------------------------------------
# Replace / delete
# -----------------------------------------------------------------------------
def test_replace_keeps_identity_and_created_at(embedding_service):
    original = make_payload()
    created = embedding_service.create(original)

    updated = embedding_service.replace(
        created["id"],
        dict(original, message_content="Edited", semantic_tags=["edited"]),
    )
    assert updated["id"] == created["id"]
    assert updated["message_content"] == "Edited"
    assert updated["semantic_tags"] == ["edited"]
    assert updated["created_at"] == created["created_at"]
    assert updated["timestamp"] == created["timestamp"]
    assert updated["updated_at"] >= created["updated_at"]


def test_replace_honours_supplied_timestamp(embedding_service):
    original = make_payload()
    created = embedding_service.create(original)

    updated = embedding_service.replace(created["id"], dict(original, timestamp="2025-06-01T12:00:00Z"))
    assert updated["timestamp"] == "2025-06-01T12:00:00+00:00"


def test_replace_rejects_identifier_change(embedding_service):
    original = make_payload()
    created = embedding_service.create(original)

    with pytest.raises(ValidationError) as exc:
        embedding_service.replace(created["id"], dict(original, user_id=str(uuid.uuid4())))
    assert exc.value.messages == ["user_id: cannot be changed after creation"]


def test_replace_validates_before_lookup(mock_store):
    service = ChatEmbeddingService(store=mock_store)
    with pytest.raises(ValidationError):
        service.replace(str(uuid.uuid4()), {"message_content": "partial"})
    mock_store.find_one.assert_not_called()


def test_replace_missing_raises_not_found(embedding_service):
    with pytest.raises(NotFoundError):
        embedding_service.replace(str(uuid.uuid4()), make_payload())


def test_delete_then_get(embedding_service):
    created = embedding_service.create(make_payload())

    result = embedding_service.delete(created["id"])
    assert result == {"id": created["id"], "deleted": True, "deleted_count": 1}

    with pytest.raises(NotFoundError):
        embedding_service.get_by_id(created["id"])
    with pytest.raises(NotFoundError):
        embedding_service.delete(created["id"])


# -----------------------------------------------------------------------------
# Batch
# -----------------------------------------------------------------------------
def test_batch_inserts_all(embedding_service):
    result = embedding_service.create_batch([make_payload() for _ in range(3)])

    assert result["inserted_count"] == 3
    assert len(result["inserted_ids"]) == 3
    assert [d["id"] for d in result["documents"]] == result["inserted_ids"]
    assert "primary_embedding" not in result["documents"][0]
    assert embedding_service.store.count_documents({}) == 3


def test_batch_is_all_or_nothing(embedding_service):
    items = [make_payload(), make_payload(primary_embedding=[0.1] * 5)]
    with pytest.raises(ValidationError):
        embedding_service.create_batch(items)
    assert embedding_service.store.count_documents({}) == 0


# -----------------------------------------------------------------------------
# Similarity search
# -----------------------------------------------------------------------------
def test_find_similar_orders_by_score(embedding_service):
    user_id = str(uuid.uuid4())
    embedding_service.create(make_payload(user_id=user_id, primary_embedding=unit_vector(5), message_content="near"))
    embedding_service.create(make_payload(user_id=user_id, primary_embedding=unit_vector(9), message_content="far"))
    embedding_service.create(make_payload(primary_embedding=unit_vector(5), message_content="other user"))

    result = embedding_service.find_similar(
        {"primary_embedding": unit_vector(5), "limit": 5, "filters": {"user_id": user_id}}
    )
    assert result["query_vector_dimensions"] == PRIMARY_DIMENSIONS
    assert result["results_count"] == 2
    assert [r["message_content"] for r in result["results"]] == ["near", "far"]

    scores = [r["similarity_score"] for r in result["results"]]
    assert scores == sorted(scores, reverse=True)
    assert result["max_similarity_score"] == scores[0]
    assert result["min_similarity_score"] == scores[-1]


def test_find_similar_respects_limit_and_filters(embedding_service):
    embedding_service.create(make_payload(semantic_tags=["work"]))
    embedding_service.create(
        make_payload(
            semantic_tags=["travel"],
            emotion_context={"dominant_emotion": "fear", "intensity": 0.2, "emotions": {"fear": 0.2}},
        )
    )
    embedding_service.create(make_payload(semantic_tags=["travel", "work"]))

    by_tag = embedding_service.find_similar(
        {"primary_embedding": unit_vector(0), "filters": {"semantic_tags": ["travel"]}}
    )
    assert by_tag["results_count"] == 2

    by_emotion = embedding_service.find_similar(
        {
            "primary_embedding": unit_vector(0),
            "filters": {"emotion_filter": {"dominant_emotion": "joy", "min_intensity": 0.5}},
        }
    )
    assert by_emotion["results_count"] == 2

    limited = embedding_service.find_similar({"primary_embedding": unit_vector(0), "limit": 1})
    assert limited["results_count"] == 1


def test_find_similar_empty_result(embedding_service):
    result = embedding_service.find_similar({"primary_embedding": unit_vector(0)})
    assert result["results_count"] == 0
    assert result["max_similarity_score"] == 0
    assert result["min_similarity_score"] == 0


# -----------------------------------------------------------------------------
# Listing / statistics
# -----------------------------------------------------------------------------
def test_query_paginates(embedding_service):
    session_id = str(uuid.uuid4())
    for i in range(5):
        embedding_service.create(make_payload(session_id=session_id, text_length=i))

    page = embedding_service.query(
        {"session_id": session_id, "limit": 2, "offset": 2, "sort_by": "text_length", "sort_order": "asc"}
    )
    assert [r["text_length"] for r in page["results"]] == [2, 3]
    assert "primary_embedding" not in page["results"][0]
    assert page["pagination"] == {
        "total_count": 5,
        "current_page": 2,
        "total_pages": 3,
        "has_next": True,
        "has_previous": True,
    }


def test_query_by_date_range(embedding_service):
    original = make_payload()
    created = embedding_service.create(original)
    embedding_service.replace(created["id"], dict(original, timestamp="2020-03-01T00:00:00Z"))
    embedding_service.create(make_payload())

    page = embedding_service.query(
        {"date_range": {"start": "2020-01-01T00:00:00Z", "end": "2020-12-31T00:00:00Z"}}
    )
    assert [r["id"] for r in page["results"]] == [created["id"]]


def test_paginate_empty():
    assert ChatEmbeddingService.paginate(0, offset=0, limit=20) == {
        "total_count": 0,
        "current_page": 1,
        "total_pages": 0,
        "has_next": False,
        "has_previous": False,
    }


def test_list_by_user_and_session(embedding_service):
    user_id = str(uuid.uuid4())
    session_id = str(uuid.uuid4())
    embedding_service.create(make_payload(user_id=user_id, session_id=session_id))
    embedding_service.create(make_payload(user_id=user_id))
    embedding_service.create(make_payload())

    assert embedding_service.list_by_user(user_id)["pagination"]["total_count"] == 2
    assert embedding_service.list_by_session(session_id)["pagination"]["total_count"] == 1


def test_statistics(embedding_service):
    embedding_service.create(make_payload(processing_time_ms=10))
    embedding_service.create(make_payload(processing_time_ms=20, message_type="ai_response"))

    stats = embedding_service.statistics()
    assert stats["total_embeddings"] == 2
    assert stats["recent_embeddings_7_days"] == 2
    assert stats["message_type_distribution"] == {"user_message": 1, "ai_response": 1}
    assert stats["processing_statistics"] == {
        "avg_processing_time": 15.0,
        "min_processing_time": 10.0,
        "max_processing_time": 20.0,
    }
    assert stats["collection_info"]["vector_dimensions"] == {"primary": 768, "lightweight": 384}


def test_statistics_on_empty_collection(embedding_service):
    stats = embedding_service.statistics()
    assert stats["total_embeddings"] == 0
    assert stats["message_type_distribution"] == {}
    assert stats["processing_statistics"]["avg_processing_time"] == 0


def test_replace_with_identical_payload_changes_only_updated_at(embedding_service):
    original = make_payload()
    created = embedding_service.create(original)

    replaced = embedding_service.replace(created["id"], original)

    assert replaced["updated_at"] >= created["updated_at"]
    unchanged = {k: v for k, v in created.items() if k != "updated_at"}
    assert {k: replaced[k] for k in unchanged} == unchanged


def test_oversized_batch_never_reaches_store(mock_store):
    service = ChatEmbeddingService(store=mock_store)
    with pytest.raises(ValidationError):
        service.create_batch([make_payload() for _ in range(51)])
    assert mock_store.method_calls == []


def test_batch_of_fifty_gets_distinct_ids(embedding_service):
    result = embedding_service.create_batch([make_payload() for _ in range(50)])
    assert result["inserted_count"] == 50
    assert len(set(result["inserted_ids"])) == 50


def test_find_similar_keeps_store_ranking(mock_store):
    mock_store.find_similar.return_value = [
        {"_id": "a", "$vector": [0.0] * PRIMARY_DIMENSIONS, "$similarity": 0.9},
        {"_id": "b", "$vector": [0.0] * PRIMARY_DIMENSIONS, "$similarity": 0.4},
    ]
    service = ChatEmbeddingService(store=mock_store)

    result = service.find_similar({"primary_embedding": [0.0] * PRIMARY_DIMENSIONS, "limit": 2})

    mock_store.find_similar.assert_called_once_with({}, [0.0] * PRIMARY_DIMENSIONS, limit=2)
    assert [r["id"] for r in result["results"]] == ["a", "b"]
    assert result["max_similarity_score"] == 0.9
    assert result["min_similarity_score"] == 0.4


def test_query_pagination_over_25_records(embedding_service):
    user_id = str(uuid.uuid4())
    embedding_service.create_batch([make_payload(user_id=user_id) for _ in range(25)])

    first = embedding_service.query({"user_id": user_id, "offset": 0, "limit": 10})["pagination"]
    assert (first["total_pages"], first["has_next"], first["has_previous"]) == (3, True, False)

    last = embedding_service.query({"user_id": user_id, "offset": 20, "limit": 10})
    assert len(last["results"]) == 5
    assert (last["pagination"]["has_next"], last["pagination"]["has_previous"]) == (False, True)


def test_get_returns_submitted_vectors_exactly(embedding_service):
    payload = make_payload(primary_embedding=[0.1] * PRIMARY_DIMENSIONS)
    created = embedding_service.create(payload)

    fetched = embedding_service.get_by_id(created["id"])
    assert fetched["primary_embedding"] == payload["primary_embedding"]
    assert fetched["lightweight_embedding"] == payload["lightweight_embedding"]

    listed = embedding_service.find_similar({"primary_embedding": payload["primary_embedding"], "limit": 1})
    assert listed["results"][0]["primary_embedding"] == payload["primary_embedding"]


def test_failed_replace_keeps_original_record(embedding_service, chroma_store, monkeypatch):
    original = make_payload(semantic_tags=["before"])
    created = embedding_service.create(original)

    def dropped_write(documents):
        raise ConnectionError("write dropped")

    monkeypatch.setattr(chroma_store, "_add", dropped_write)
    with pytest.raises(PersistenceError):
        embedding_service.replace(created["id"], dict(original, message_content="Edited", semantic_tags=["after"]))
    monkeypatch.undo()

    assert embedding_service.get_by_id(created["id"]) == created
    assert chroma_store.count_documents({"semantic_tags": {"$in": ["before"]}}) == 1
    assert chroma_store.count_documents({"semantic_tags": {"$in": ["after"]}}) == 0


def test_get_matches_submitted_payload(embedding_service):
    payload = make_payload()
    created = embedding_service.create(payload)

    expected = validate_create(payload).model_dump(mode="json", exclude={"timestamp"})
    fetched = embedding_service.get_by_id(created["id"])
    assert {k: fetched[k] for k in expected} == expected
