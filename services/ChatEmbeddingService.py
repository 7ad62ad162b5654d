# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-02
# Updated: 2026-10-11
# Description: ChatEmbeddingService.py
# -----------------------------------------------------------------------------
from __future__ import annotations

import logging
import math
import uuid
from datetime import timedelta
from typing import Any, Dict, Optional, Sequence

from embedding.ChatEmbeddingSchema import (
    LIGHTWEIGHT_DIMENSIONS,
    PRIMARY_DIMENSIONS,
    ListQuery,
    SimilaritySearchRequest,
    SortOrder,
)
from embedding.EmbeddingRecord import (
    BATCH_SUMMARY_FIELDS,
    LIST_FIELDS,
    to_record,
    to_store_document,
)
from embedding.errors import NotFoundError, PersistenceError, ValidationError
from embedding.validation import (
    validate_batch,
    validate_create,
    validate_list_query,
    validate_similarity_search,
)
from services.FilterBuilder import LIST_FILTER, SIMILARITY_FILTER
from utility.logging_utils import get_class_logger
from utility.time_utils import to_utc_iso, utc_now
from vectorstore.ChatEmbeddingStore import ChatEmbeddingStore

# Identifiers are fixed at creation; a replacement may not move a record
IMMUTABLE_FIELDS = ("user_id", "entry_id", "session_id")

RECENT_WINDOW = timedelta(days=7)


class ChatEmbeddingService:
    """
    Record service for chat embeddings.

    Responsibilities:
      - validate input against the record contract before touching the store
      - build store documents (ids, timestamps, vector slot)
      - map store documents back to the public record shape
      - compose filters, pagination metadata and summary statistics

    Ranking for similarity search is left entirely to the store.
    """

    def __init__(
        self,
        *,
        store: ChatEmbeddingStore,
        collection_name: str = "chat_embeddings",
        logger: logging.Logger | None = None,
    ) -> None:
        self.store = store
        self.collection_name = collection_name
        self.logger = logger or get_class_logger(self.__class__)

    # -------------------------------------------------------------------------
    # Create / read
    # -------------------------------------------------------------------------
    def create(self, data: Any) -> Dict[str, Any]:
        payload = validate_create(data)

        now = to_utc_iso(utc_now())
        document = to_store_document(
            str(uuid.uuid4()),
            payload.model_dump(mode="json", exclude={"timestamp"}),
            timestamp=now,
            created_at=now,
            updated_at=now,
        )

        try:
            self.store.insert_one(document)
        except Exception as e:
            self.logger.error("create: insert failed: %s", e, exc_info=True)
            raise PersistenceError("create chat embedding", e) from e

        self.logger.info("create: id='%s' user_id='%s' (done)", document["_id"], document["user_id"])
        return to_record(document)

    def get_by_id(self, embedding_id: str) -> Dict[str, Any]:
        document = self._find_existing(embedding_id, operation="get chat embedding")
        return to_record(document)

    def _find_existing(self, embedding_id: str, *, operation: str) -> Dict[str, Any]:
        try:
            document = self.store.find_one(embedding_id)
        except Exception as e:
            self.logger.error("%s: lookup of id='%s' failed: %s", operation, embedding_id, e, exc_info=True)
            raise PersistenceError(operation, e) from e

        if document is None:
            self.logger.warning("%s: id='%s' not found", operation, embedding_id)
            raise NotFoundError(embedding_id)
        return document

    # -------------------------------------------------------------------------
    # Replace / delete
    # -------------------------------------------------------------------------
    def replace(self, embedding_id: str, data: Any) -> Dict[str, Any]:
        """
        Whole-record replace. Only `id` and `created_at` survive from the
        stored document; `timestamp` is kept unless the caller sends one.
        """
        payload = validate_create(data)
        existing = self._find_existing(embedding_id, operation="update chat embedding")

        mismatched = [
            f"{field}: cannot be changed after creation"
            for field in IMMUTABLE_FIELDS
            if getattr(payload, field) != existing.get(field)
        ]
        if mismatched:
            raise ValidationError(mismatched)

        timestamp = to_utc_iso(payload.timestamp) if payload.timestamp else existing.get("timestamp")
        document = to_store_document(
            embedding_id,
            payload.model_dump(mode="json", exclude={"timestamp"}),
            timestamp=timestamp,
            created_at=existing.get("created_at"),
            updated_at=to_utc_iso(utc_now()),
        )

        try:
            matched = self.store.replace_one(embedding_id, document)
        except Exception as e:
            self.logger.error("replace: id='%s' failed: %s", embedding_id, e, exc_info=True)
            raise PersistenceError("update chat embedding", e) from e

        if matched == 0:
            # removed between the lookup and the write
            raise NotFoundError(embedding_id)

        self.logger.info("replace: id='%s' (done)", embedding_id)
        return self.get_by_id(embedding_id)

    def delete(self, embedding_id: str) -> Dict[str, Any]:
        try:
            deleted = self.store.delete_one(embedding_id)
        except Exception as e:
            self.logger.error("delete: id='%s' failed: %s", embedding_id, e, exc_info=True)
            raise PersistenceError("delete chat embedding", e) from e

        if deleted == 0:
            self.logger.warning("delete: id='%s' not found", embedding_id)
            raise NotFoundError(embedding_id)

        self.logger.info("delete: id='%s' (done)", embedding_id)
        return {"id": embedding_id, "deleted": True, "deleted_count": deleted}

    # -------------------------------------------------------------------------
    # Batch
    # -------------------------------------------------------------------------
    def create_batch(self, items: Sequence[Any]) -> Dict[str, Any]:
        payloads = validate_batch(items)

        now = to_utc_iso(utc_now())
        documents = [
            to_store_document(
                str(uuid.uuid4()),
                p.model_dump(mode="json", exclude={"timestamp"}),
                timestamp=now,
                created_at=now,
                updated_at=now,
            )
            for p in payloads
        ]

        try:
            inserted_ids = self.store.insert_many(documents)
        except Exception as e:
            self.logger.error("create_batch: insert of %d documents failed: %s", len(documents), e, exc_info=True)
            raise PersistenceError("create chat embeddings batch", e) from e

        self.logger.info("create_batch: inserted=%d (done)", len(inserted_ids))
        return {
            "inserted_count": len(inserted_ids),
            "inserted_ids": list(inserted_ids),
            "documents": [to_record(d, BATCH_SUMMARY_FIELDS) for d in documents],
        }

    # -------------------------------------------------------------------------
    # Similarity search
    # -------------------------------------------------------------------------
    def find_similar(self, request: SimilaritySearchRequest | Dict[str, Any]) -> Dict[str, Any]:
        if not isinstance(request, SimilaritySearchRequest):
            request = validate_similarity_search(request)

        predicate = SIMILARITY_FILTER.build(request.filters)
        self.logger.info("find_similar: limit=%d filter=%s", request.limit, predicate)

        try:
            matches = self.store.find_similar(predicate, request.primary_embedding, limit=request.limit)
        except Exception as e:
            self.logger.error("find_similar failed: %s", e, exc_info=True)
            raise PersistenceError("find similar chat embeddings", e) from e

        results = [to_record(m, with_similarity=True) for m in matches[: request.limit]]
        scores = [r["similarity_score"] for r in results if r["similarity_score"] is not None]

        return {
            "query_vector_dimensions": len(request.primary_embedding),
            "results_count": len(results),
            "max_similarity_score": max(scores) if scores else 0,
            "min_similarity_score": min(scores) if scores else 0,
            "results": results,
        }

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------
    def query(self, options: ListQuery | Dict[str, Any] | None = None) -> Dict[str, Any]:
        if not isinstance(options, ListQuery):
            options = validate_list_query(options or {})

        predicate = LIST_FILTER.build(options)
        direction = 1 if options.sort_order == SortOrder.ASC else -1

        try:
            documents = self.store.find(
                predicate,
                sort=(options.sort_by.value, direction),
                skip=options.offset,
                limit=options.limit,
                include_vector=False,
            )
            total_count = self.store.count_documents(predicate)
        except Exception as e:
            self.logger.error("query failed: %s", e, exc_info=True)
            raise PersistenceError("query chat embeddings", e) from e

        self.logger.info(
            "query: filter=%s offset=%d limit=%d -> %d of %d",
            predicate, options.offset, options.limit, len(documents), total_count,
        )
        return {
            "results": [to_record(d, LIST_FIELDS) for d in documents],
            "pagination": self.paginate(total_count, offset=options.offset, limit=options.limit),
        }

    @staticmethod
    def paginate(total_count: int, *, offset: int, limit: int) -> Dict[str, Any]:
        return {
            "total_count": total_count,
            "current_page": offset // limit + 1,
            "total_pages": math.ceil(total_count / limit),
            "has_next": offset + limit < total_count,
            "has_previous": offset > 0,
        }

    def list_by_user(
        self,
        user_id: str,
        *,
        limit: int | str = 20,
        offset: int | str = 0,
        sort_by: str = "timestamp",
        sort_order: str = "desc",
    ) -> Dict[str, Any]:
        return self.query(
            {"user_id": user_id, "limit": limit, "offset": offset, "sort_by": sort_by, "sort_order": sort_order}
        )

    def list_by_session(
        self,
        session_id: str,
        *,
        limit: int | str = 50,
        offset: int | str = 0,
        sort_by: str = "timestamp",
        sort_order: str = "asc",
    ) -> Dict[str, Any]:
        return self.query(
            {"session_id": session_id, "limit": limit, "offset": offset, "sort_by": sort_by, "sort_order": sort_order}
        )

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------
    def statistics(self) -> Dict[str, Any]:
        since = to_utc_iso(utc_now() - RECENT_WINDOW)

        try:
            total_count = self.store.count_documents({})
            recent_count = self.store.count_documents({"timestamp": {"$gte": since}})
            distribution = self.store.group_count("message_type")
            processing: Optional[Dict[str, float]] = self.store.numeric_summary("processing_time_ms")
        except Exception as e:
            self.logger.error("statistics failed: %s", e, exc_info=True)
            raise PersistenceError("get statistics", e) from e

        processing = processing or {}
        self.logger.info("statistics: total=%d recent=%d", total_count, recent_count)
        return {
            "total_embeddings": total_count,
            "recent_embeddings_7_days": recent_count,
            "message_type_distribution": dict(distribution),
            "processing_statistics": {
                "avg_processing_time": processing.get("avg", 0),
                "min_processing_time": processing.get("min", 0),
                "max_processing_time": processing.get("max", 0),
            },
            "collection_info": {
                "name": self.collection_name,
                "vector_dimensions": {
                    "primary": PRIMARY_DIMENSIONS,
                    "lightweight": LIGHTWEIGHT_DIMENSIONS,
                },
            },
        }
