from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel


class ActionResult(BaseModel):
    """Uniform envelope returned to callers instead of raising.

    ``message`` carries judge rejections (``"503 Unable to create submission"``),
    ``error`` carries validation and unexpected failures.
    """
    success: bool
    data: Optional[Any] = None
    message: Optional[str] = None
    error: Optional[str] = None


class HealthCheckResponse(BaseModel):
    """Health check response"""
    status: str
    time_utc: datetime
    uptime_seconds: float
    version: str
    environment: str
    components: Dict[str, str]
