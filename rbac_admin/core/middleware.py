"""Request-id access logging and CORS."""

import uuid
import time
import logging

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from rbac_admin.core.config import settings

logger = logging.getLogger("rbac_admin")

REQUEST_ID_HEADER = "X-Request-Id"


def request_id_of(request: Request) -> str:
    """Request id assigned by ``RequestIdMiddleware``, or ``-`` outside it."""
    return getattr(request.state, "request_id", "-")


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and write one access line per response.

    A caller-supplied ``X-Request-Id`` is kept so the id can be followed
    across services; otherwise a new one is generated. The id is stored on
    ``request.state`` where the exception handlers pick it up.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()

        response: Response = await call_next(request)

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            "[%s] %s %s -> %s (%.1fms)",
            request_id,
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response


def setup_middleware(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["GET", "POST"],
        allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(RequestIdMiddleware)
