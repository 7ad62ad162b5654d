# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-10-08
# Description: dependencies.py
# -----------------------------------------------------------------------------
from functools import lru_cache

from fastapi import Depends

from api.AppContainer import AppContainer
from services.ChatEmbeddingService import ChatEmbeddingService
from services.SessionCleanupService import SessionCleanupService
from services.StoreHealthService import StoreHealthService

@lru_cache
def get_container() -> AppContainer:
    # built on first request so importing the app needs no store config
    return AppContainer()

def get_embedding_service(container: AppContainer = Depends(get_container)) -> ChatEmbeddingService:
    return container.embedding_service

def get_session_cleanup_service(container: AppContainer = Depends(get_container)) -> SessionCleanupService:
    return container.session_cleanup_service

def get_health_service(container: AppContainer = Depends(get_container)) -> StoreHealthService:
    return container.health_service
