# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-07
# Updated: 2026-10-08
# Description: health.py
# -----------------------------------------------------------------------------
from typing import Any, Dict

from pydantic import BaseModel

class HealthResponse(BaseModel):
    status: str
    message: str

class DeepHealthResponse(BaseModel):
    status: str
    store: Dict[str, Any]
