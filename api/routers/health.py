# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-10-08
# Description: health.py
# -----------------------------------------------------------------------------
import logging
from fastapi import APIRouter, Depends

from api.schemas.health import HealthResponse, DeepHealthResponse
from api.dependencies import get_health_service
from services.StoreHealthService import StoreHealthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check():
    return HealthResponse(status="ok", message="Chat Embeddings API running")


@router.get("/deep", response_model=DeepHealthResponse)
def deep_health_check(
    svc: StoreHealthService = Depends(get_health_service),
) -> DeepHealthResponse:
    logger.info("GET /health/deep called")
    result = svc.deep_health()
    logger.info("GET /health/deep completed status=%s", result.status)
    return result
