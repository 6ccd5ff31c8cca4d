from __future__ import annotations

from fastapi import Request
from slowapi import Limiter

from companies_api.config import settings


def client_ip(request: Request) -> str:
    if settings.TRUST_PROXY:
        forwarded = request.headers.get("X-Forwarded-For", "")
        if forwarded:
            return forwarded.split(",")[0].strip()

    return request.client.host if request.client else "unknown"


limiter = Limiter(key_func=client_ip, enabled=settings.RATE_LIMIT_ENABLED)
