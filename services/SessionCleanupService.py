# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-07
# Description: SessionCleanupService.py
# -----------------------------------------------------------------------------
import logging
from typing import Any, Dict, List

from embedding.errors import ChatEmbeddingError
from services.ChatEmbeddingService import ChatEmbeddingService
from utility.logging_utils import get_class_logger


class SessionCleanupService:
    """
    Removes every chat embedding of a conversation session.

    Deletes run one record at a time and are not atomic as a group: a failed
    delete is logged and recorded, the remaining deletes still run, and the
    caller gets found vs deleted counts.
    """

    def __init__(
        self,
        *,
        embedding_service: ChatEmbeddingService,
        max_records: int = 1000,
        logger: logging.Logger | None = None,
    ) -> None:
        self.embedding_service = embedding_service
        self.max_records = max_records
        self.logger = logger or get_class_logger(self.__class__)

    def _session_ids(self, session_id: str) -> List[str]:
        # ListQuery caps a page at 100 records
        page_size = min(100, self.max_records)
        ids: List[str] = []
        offset = 0

        while len(ids) < self.max_records:
            page = self.embedding_service.query(
                {
                    "session_id": session_id,
                    "limit": page_size,
                    "offset": offset,
                    "sort_by": "timestamp",
                    "sort_order": "asc",
                }
            )
            ids.extend(r["id"] for r in page["results"])
            if not page["pagination"]["has_next"]:
                break
            offset += page_size

        return ids[: self.max_records]

    def delete_session(self, session_id: str) -> Dict[str, Any]:
        self.logger.info("delete_session: session_id='%s' (start)", session_id)

        # Collect ids up front so deletes do not shift the pages being read
        ids = self._session_ids(session_id)

        deleted_count = 0
        failed_ids: List[str] = []
        for embedding_id in ids:
            try:
                self.embedding_service.delete(embedding_id)
                deleted_count += 1
            except ChatEmbeddingError as e:
                self.logger.warning("delete_session: failed to delete embedding '%s': %s", embedding_id, e)
                failed_ids.append(embedding_id)

        self.logger.info(
            "delete_session: session_id='%s' found=%d deleted=%d (done)",
            session_id,
            len(ids),
            deleted_count,
        )
        return {
            "session_id": session_id,
            "found_count": len(ids),
            "deleted_count": deleted_count,
            "failed_ids": failed_ids,
        }
