# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-08
# Description: chat_embeddings.py
# -----------------------------------------------------------------------------
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class ApiResponse(BaseModel):
    success: bool = True
    data: Any = None
    message: Optional[str] = None


class BatchCreateRequest(BaseModel):
    # items are validated by the record contract, not here
    embeddings: Any = None


class DeleteSessionData(BaseModel):
    session_id: str
    found_count: int
    deleted_count: int
    failed_ids: List[str] = []


class DeleteSessionResponse(BaseModel):
    success: bool = True
    data: DeleteSessionData
    message: Optional[str] = None


class ErrorDetail(BaseModel):
    success: bool = False
    error: str
    details: Optional[str] = None
    messages: Optional[List[str]] = None

    def as_detail(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
