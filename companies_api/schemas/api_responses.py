from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error: str
    status: int
    details: str | None = None


class HealthResponse(BaseModel):
    ok: bool
    name: str
    timestamp: datetime
    database: str
    version: str
