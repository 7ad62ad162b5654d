# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-10-08
# Description: main.py
# -----------------------------------------------------------------------------
from fastapi import FastAPI
from api.routers import health, chat_embeddings
import logging

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",)
app = FastAPI(title="Chat Embeddings API")
app.include_router(health.router)
app.include_router(chat_embeddings.router)


if __name__ == "__main__":
    import os
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=os.getenv("CHAT_EMB_API_HOST", "127.0.0.1"),
        port=int(os.getenv("CHAT_EMB_API_PORT", "8000")),
        log_level="info",
        reload=False,
    )
