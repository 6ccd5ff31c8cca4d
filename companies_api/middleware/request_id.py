from __future__ import annotations

import re
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Incoming ids are echoed back and logged, so only short opaque tokens are trusted.
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def resolve_request_id(incoming: str | None) -> str:
    if incoming and _VALID_REQUEST_ID.match(incoming):
        return incoming
    return uuid.uuid4().hex


def get_request_id(request: Request) -> str:
    """Returns the id bound by :class:`RequestIDMiddleware`, creating one if it never ran."""
    request_id = getattr(request.state, "request_id", None)
    if request_id is None:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
    return request_id


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tags each request with an id shared by its log lines and its response."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = get_request_id(request)

        with structlog.contextvars.bound_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        ):
            response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
