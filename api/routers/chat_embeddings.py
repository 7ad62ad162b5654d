# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-08
# Description: chat_embeddings router
# -----------------------------------------------------------------------------
import logging
from typing import Any, Dict, NoReturn, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query

import settings
from api.dependencies import get_embedding_service, get_session_cleanup_service
from api.schemas.chat_embeddings import (
    ApiResponse,
    BatchCreateRequest,
    DeleteSessionData,
    DeleteSessionResponse,
    ErrorDetail,
)
from embedding.errors import NotFoundError, PersistenceError, ValidationError
from services.ChatEmbeddingService import ChatEmbeddingService
from services.SessionCleanupService import SessionCleanupService

logger = logging.getLogger(__name__)

router = APIRouter(prefix=settings.API_PREFIX, tags=["chat-embeddings"])


def _raise_http(route: str, e: Exception, *, label: str = "Validation Error") -> NoReturn:
    """Map service failures to status codes."""
    if isinstance(e, ValidationError):
        logger.warning("%s -> 400: %s", route, e)
        detail = ErrorDetail(error=label, details=str(e), messages=e.messages)
        raise HTTPException(status_code=400, detail=detail.as_detail())
    if isinstance(e, NotFoundError):
        logger.info("%s -> 404: %s", route, e)
        raise HTTPException(status_code=404, detail=ErrorDetail(error=str(e)).as_detail())
    if isinstance(e, PersistenceError):
        logger.error("%s -> 500: %s", route, e)
        raise HTTPException(status_code=500, detail=ErrorDetail(error=str(e)).as_detail())
    logger.exception("%s -> 500: %s", route, e)
    raise HTTPException(status_code=500, detail=ErrorDetail(error=f"{route} failed: {e}").as_detail())


def _drop_none(params: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in params.items() if v is not None}


@router.get("/stats", response_model=ApiResponse)
def get_stats(svc: ChatEmbeddingService = Depends(get_embedding_service)) -> ApiResponse:
    logger.info("GET /stats (start)")
    try:
        stats = svc.statistics()
    except Exception as e:
        _raise_http("GET /stats", e)
    return ApiResponse(data=stats)


@router.post("/similarity", response_model=ApiResponse)
def post_similarity(
    payload: Dict[str, Any] = Body(...),
    svc: ChatEmbeddingService = Depends(get_embedding_service),
) -> ApiResponse:
    logger.info("POST /similarity (start) limit=%s", payload.get("limit"))
    try:
        result = svc.find_similar(payload)
    except Exception as e:
        _raise_http("POST /similarity", e)
    return ApiResponse(data=result, message=f"Found {result['results_count']} similar chat embeddings")


@router.post("/batch", response_model=ApiResponse, status_code=201)
def post_batch(
    req: BatchCreateRequest,
    svc: ChatEmbeddingService = Depends(get_embedding_service),
) -> ApiResponse:
    logger.info("POST /batch (start)")
    try:
        result = svc.create_batch(req.embeddings)
    except Exception as e:
        _raise_http("POST /batch", e)
    return ApiResponse(data=result, message=f"Successfully created {result['inserted_count']} chat embeddings")


@router.get("/query", response_model=ApiResponse)
def get_query(
    user_id: Optional[str] = None,
    session_id: Optional[str] = None,
    message_type: Optional[str] = None,
    start: Optional[str] = Query(None, description="ISO-8601 lower bound on timestamp"),
    end: Optional[str] = Query(None, description="ISO-8601 upper bound on timestamp"),
    limit: Optional[str] = None,
    offset: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
    svc: ChatEmbeddingService = Depends(get_embedding_service),
) -> ApiResponse:
    # raw strings go to the list-query contract so every violation is reported together
    options = _drop_none({
        "user_id": user_id,
        "session_id": session_id,
        "message_type": message_type,
        "limit": limit,
        "offset": offset,
        "sort_by": sort_by,
        "sort_order": sort_order,
    })
    if start is not None or end is not None:
        options["date_range"] = _drop_none({"start": start, "end": end})

    logger.info("GET /query (start) options=%s", options)
    try:
        result = svc.query(options)
    except Exception as e:
        _raise_http("GET /query", e, label="Query Validation Error")
    return ApiResponse(data=result, message=f"Found {len(result['results'])} chat embeddings")


@router.post("", response_model=ApiResponse, status_code=201)
def post_chat_embedding(
    payload: Dict[str, Any] = Body(...),
    svc: ChatEmbeddingService = Depends(get_embedding_service),
) -> ApiResponse:
    logger.info("POST / (start)")
    try:
        record = svc.create(payload)
    except Exception as e:
        _raise_http("POST /", e)
    logger.info("POST / (done) id='%s'", record["id"])
    return ApiResponse(data=record, message="Chat embedding created successfully")


@router.get("/user/{user_id}", response_model=ApiResponse)
def get_user_embeddings(
    user_id: str,
    limit: Optional[str] = None,
    offset: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
    svc: ChatEmbeddingService = Depends(get_embedding_service),
) -> ApiResponse:
    try:
        result = svc.list_by_user(
            user_id,
            **_drop_none({"limit": limit, "offset": offset, "sort_by": sort_by, "sort_order": sort_order}),
        )
    except Exception as e:
        _raise_http("GET /user/{user_id}", e)
    return ApiResponse(
        data=result,
        message=f"Found {len(result['results'])} chat embeddings for user {user_id}",
    )


@router.get("/session/{session_id}", response_model=ApiResponse)
def get_session_embeddings(
    session_id: str,
    limit: Optional[str] = None,
    offset: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
    svc: ChatEmbeddingService = Depends(get_embedding_service),
) -> ApiResponse:
    try:
        result = svc.list_by_session(
            session_id,
            **_drop_none({"limit": limit, "offset": offset, "sort_by": sort_by, "sort_order": sort_order}),
        )
    except Exception as e:
        _raise_http("GET /session/{session_id}", e)
    return ApiResponse(
        data=result,
        message=f"Found {len(result['results'])} chat embeddings for session {session_id}",
    )


@router.delete("/session/{session_id}", response_model=DeleteSessionResponse)
def delete_session_embeddings(
    session_id: str,
    svc: SessionCleanupService = Depends(get_session_cleanup_service),
) -> DeleteSessionResponse:
    logger.info("DELETE /session/{session_id} (start) session_id='%s'", session_id)
    try:
        result = svc.delete_session(session_id)
    except Exception as e:
        _raise_http("DELETE /session/{session_id}", e)
    return DeleteSessionResponse(
        data=DeleteSessionData(**result),
        message=f"Deleted {result['deleted_count']} chat embeddings from session {session_id}",
    )


@router.get("/{embedding_id}", response_model=ApiResponse)
def get_chat_embedding(
    embedding_id: str,
    svc: ChatEmbeddingService = Depends(get_embedding_service),
) -> ApiResponse:
    try:
        record = svc.get_by_id(embedding_id)
    except Exception as e:
        _raise_http("GET /{embedding_id}", e)
    return ApiResponse(data=record)


@router.put("/{embedding_id}", response_model=ApiResponse)
def put_chat_embedding(
    embedding_id: str,
    payload: Dict[str, Any] = Body(...),
    svc: ChatEmbeddingService = Depends(get_embedding_service),
) -> ApiResponse:
    logger.info("PUT /{embedding_id} (start) id='%s'", embedding_id)
    try:
        record = svc.replace(embedding_id, payload)
    except Exception as e:
        _raise_http("PUT /{embedding_id}", e)
    return ApiResponse(data=record, message="Chat embedding updated successfully")


@router.delete("/{embedding_id}", response_model=ApiResponse)
def delete_chat_embedding(
    embedding_id: str,
    svc: ChatEmbeddingService = Depends(get_embedding_service),
) -> ApiResponse:
    logger.info("DELETE /{embedding_id} (start) id='%s'", embedding_id)
    try:
        result = svc.delete(embedding_id)
    except Exception as e:
        _raise_http("DELETE /{embedding_id}", e)
    return ApiResponse(data=result, message="Chat embedding deleted successfully")
