# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-16
# Updated: 2026-10-19
# Description: ChromaChatEmbeddingStore
# -----------------------------------------------------------------------------
import json
import threading
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import chromadb
import numpy as np
from chromadb import ClientAPI
from chromadb.api.models.Collection import Collection

from config.Config import Config
from embedding.ChatEmbeddingSchema import PRIMARY_DIMENSIONS
from embedding.EmbeddingRecord import ID_SLOT, SIMILARITY_SLOT, VECTOR_SLOT
from utility.logging_utils import get_class_logger
from utility.time_utils import utc_now_iso
from vectorstore.ChatEmbeddingStore import ChatEmbeddingStore, Document, Filter
from vectorstore.chroma_filters import build_metadata, metadata_key, sort_value, to_where


def _as_list(vector: Any) -> List[float]:
    return np.asarray(vector, dtype=float).tolist()


@dataclass
class ChromaChatEmbeddingStore(ChatEmbeddingStore):
    """
    Chroma-backed document store for chat embeddings.

    The collection handle is created lazily on first use and memoised; pass
    `client` to reuse an existing Chroma client (tests use an EphemeralClient).
    """

    cfg: Optional[Config] = None
    collection_name: str = "chat_embeddings"
    client: Optional[ClientAPI] = None
    vector_dimensions: int = PRIMARY_DIMENSIONS
    logger: Any = None

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)
        self._collection: Optional[Collection] = None
        self._lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Connection
    # -------------------------------------------------------------------------
    def _create_client(self) -> ClientAPI:
        if self.cfg is None:
            raise RuntimeError("ChromaChatEmbeddingStore needs either a client or a Config")

        mode = self.cfg.chroma_mode
        self.logger.info("Initialising Chroma client (%s)", self.cfg.summary())

        if mode == "cloud":
            return chromadb.CloudClient(
                tenant=self.cfg.chroma_tenant,
                database=self.cfg.chroma_database,
                api_key=self.cfg.chroma_api_key,
            )
        if mode == "http":
            return chromadb.HttpClient(
                host=self.cfg.chroma_host,
                port=int(self.cfg.chroma_port or 8000),
            )
        if mode == "persistent":
            return chromadb.PersistentClient(path=self.cfg.chroma_path)
        return chromadb.EphemeralClient()

    def connect(self) -> Collection:
        """Return the collection, connecting and provisioning it on first call."""
        if self._collection is not None:
            return self._collection

        with self._lock:
            if self._collection is None:
                try:
                    client = self.client or self._create_client()
                    collection = client.get_or_create_collection(
                        name=self.collection_name,
                        metadata={"hnsw:space": "cosine"},
                    )
                except Exception as e:
                    self.logger.error(
                        "Chroma connection for collection '%s' failed: %s",
                        self.collection_name,
                        e,
                        exc_info=True,
                    )
                    raise
                self.client = client
                self._collection = collection
                self.logger.info("Chroma collection ready: '%s'", self.collection_name)

        return self._collection

    def health_check(self) -> Dict[str, Any]:
        try:
            count = self.connect().count()
            return {
                "status": "healthy",
                "connected": True,
                "collection": self.collection_name,
                "vector_dimensions": self.vector_dimensions,
                "document_count": count,
                "timestamp": utc_now_iso(),
            }
        except Exception as e:
            self.logger.error("Chroma health check failed: %s", e)
            return {
                "status": "unhealthy",
                "connected": False,
                "collection": self.collection_name,
                "error": str(e),
                "timestamp": utc_now_iso(),
            }

    # -------------------------------------------------------------------------
    # Document <-> Chroma row
    # -------------------------------------------------------------------------
    def _add(self, documents: Sequence[Document]) -> List[str]:
        ids: List[str] = []
        embeddings: List[List[float]] = []
        bodies: List[str] = []
        metadatas: List[Dict[str, Any]] = []

        for doc in documents:
            doc_id = doc.get(ID_SLOT)
            vector = doc.get(VECTOR_SLOT)
            if not doc_id:
                raise ValueError("Document is missing its '_id'")
            if vector is None:
                raise ValueError(f"Document '{doc_id}' is missing its '$vector'")

            vector = _as_list(vector)
            body = {k: v for k, v in doc.items() if k not in (ID_SLOT, VECTOR_SLOT, SIMILARITY_SLOT)}
            # Chroma keeps embeddings as float32; the body keeps the exact values
            body[VECTOR_SLOT] = vector

            ids.append(doc_id)
            embeddings.append(vector)
            bodies.append(json.dumps(body))
            metadatas.append(build_metadata(doc))

        self.connect().add(
            ids=ids,
            embeddings=embeddings,
            documents=bodies,
            metadatas=metadatas,
        )
        return ids

    @staticmethod
    def _to_document(
            doc_id: str,
            body: Optional[str],
            distance: Optional[float] = None,
            *,
            include_vector: bool = True,
    ) -> Document:
        document: Document = json.loads(body) if body else {}
        document[ID_SLOT] = doc_id
        if not include_vector:
            document.pop(VECTOR_SLOT, None)
        if distance is not None:
            # cosine distance -> similarity, higher is closer
            document[SIMILARITY_SLOT] = 1.0 - float(distance)
        return document

    def _exists(self, doc_id: str) -> bool:
        res = self.connect().get(ids=[doc_id], include=[])
        return bool(res.get("ids"))

    def _matching_ids(self, where: Optional[Dict[str, Any]]) -> List[str]:
        res = self.connect().get(where=where, include=[])
        return list(res.get("ids") or [])

    # -------------------------------------------------------------------------
    # Point operations
    # -------------------------------------------------------------------------
    def insert_one(self, document: Document) -> str:
        doc_id = self._add([document])[0]
        self.logger.debug("Inserted document '%s' into '%s'", doc_id, self.collection_name)
        return doc_id

    def insert_many(self, documents: Sequence[Document]) -> List[str]:
        if not documents:
            return []
        ids = self._add(documents)
        self.logger.info("Inserted %d documents into '%s'", len(ids), self.collection_name)
        return ids

    def find_one(self, doc_id: str) -> Optional[Document]:
        res = self.connect().get(ids=[doc_id], include=["documents"])
        ids = res.get("ids") or []
        if not ids:
            return None
        return self._to_document(ids[0], res["documents"][0])

    def replace_one(self, doc_id: str, document: Document) -> int:
        collection = self.connect()
        original = collection.get(ids=[doc_id], include=["documents", "embeddings", "metadatas"])
        if not original.get("ids"):
            return 0

        replacement = dict(document)
        replacement[ID_SLOT] = doc_id

        # Chroma's update merges metadata keys, so a plain update would keep
        # tag keys the replacement no longer carries.
        collection.delete(ids=[doc_id])
        try:
            self._add([replacement])
        except Exception as e:
            self.logger.error("Replace of '%s' failed, restoring original row: %s", doc_id, e)
            collection.add(
                ids=list(original["ids"]),
                embeddings=[_as_list(v) for v in original["embeddings"]],
                documents=list(original["documents"]),
                metadatas=list(original["metadatas"]),
            )
            raise
        self.logger.debug("Replaced document '%s' in '%s'", doc_id, self.collection_name)
        return 1

    def delete_one(self, doc_id: str) -> int:
        if not self._exists(doc_id):
            return 0
        self.connect().delete(ids=[doc_id])
        self.logger.debug("Deleted document '%s' from '%s'", doc_id, self.collection_name)
        return 1

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------
    def find(
            self,
            filter: Filter,
            *,
            sort: Optional[Tuple[str, int]] = None,
            skip: int = 0,
            limit: Optional[int] = None,
            include_vector: bool = True,
    ) -> List[Document]:
        where = to_where(filter)
        self.logger.debug(
            "find on '%s' (where=%s, sort=%s, skip=%d, limit=%s)",
            self.collection_name, where, sort, skip, limit,
        )

        matched = self.connect().get(where=where, include=["metadatas"])
        rows = list(zip(matched.get("ids") or [], matched.get("metadatas") or []))

        if sort is not None:
            field, direction = sort
            rows.sort(key=lambda row: sort_value(row[1], field), reverse=direction < 0)

        end = skip + limit if limit is not None else None
        page_ids = [row[0] for row in rows[skip:end]]
        if not page_ids:
            return []

        res = self.connect().get(ids=page_ids, include=["documents"])

        by_id: Dict[str, Document] = {}
        for i, doc_id in enumerate(res.get("ids") or []):
            by_id[doc_id] = self._to_document(doc_id, res["documents"][i], include_vector=include_vector)

        # Chroma does not keep the requested id order
        return [by_id[doc_id] for doc_id in page_ids if doc_id in by_id]

    def find_similar(self, filter: Filter, vector: Sequence[float], *, limit: int) -> List[Document]:
        where = to_where(filter)

        # Chroma complains when asked for more neighbours than the filter leaves
        candidates = self._matching_ids(where)
        if not candidates:
            self.logger.info("find_similar on '%s': no candidates for where=%s", self.collection_name, where)
            return []

        n_results = min(limit, len(candidates))
        query_kwargs: Dict[str, Any] = {
            "query_embeddings": [_as_list(vector)],
            "n_results": n_results,
            "include": ["documents", "distances"],
        }
        if where is not None:
            query_kwargs["where"] = where

        res = self.connect().query(**query_kwargs)

        ids = (res.get("ids") or [[]])[0]
        bodies = (res.get("documents") or [[]])[0]
        distances = (res.get("distances") or [[]])[0]

        documents = [self._to_document(doc_id, bodies[i], distances[i]) for i, doc_id in enumerate(ids)]
        self.logger.info(
            "find_similar on '%s': returned %d results (requested %d)",
            self.collection_name,
            len(documents),
            limit,
        )
        return documents

    def count_documents(self, filter: Filter) -> int:
        if not filter:
            return self.connect().count()
        return len(self._matching_ids(to_where(filter)))

    # -------------------------------------------------------------------------
    # Aggregates
    # -------------------------------------------------------------------------
    def _metadata_values(self, field: str) -> List[Any]:
        key = metadata_key(field)
        res = self.connect().get(include=["metadatas"])
        return [m.get(key) for m in (res.get("metadatas") or []) if m]

    def group_count(self, field: str) -> Dict[str, int]:
        counts = Counter(v for v in self._metadata_values(field) if v is not None)
        return dict(counts)

    def numeric_summary(self, field: str) -> Optional[Dict[str, float]]:
        values = [
            float(v) for v in self._metadata_values(field)
            if isinstance(v, (int, float)) and not isinstance(v, bool)
        ]
        if not values:
            return None
        return {
            "min": min(values),
            "avg": sum(values) / len(values),
            "max": max(values),
        }
