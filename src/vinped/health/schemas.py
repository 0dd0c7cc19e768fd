from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class HealthCheck(BaseModel):
    ok: bool
    detail: str | None = None


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    uptime_s: float
    db: HealthCheck
