from __future__ import annotations

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from promptsmith.core.config import get_settings
from promptsmith.core.logging import LogContext, with_context

log = logging.getLogger(__name__)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tags every request with an id (client supplied or generated) and logs one line per request.

    Route handlers read the id back from `request.state.request_id` for their own log context.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        header_name = get_settings().promptsmith_request_id_header

        request_id = request.headers.get(header_name) or uuid.uuid4().hex
        request.state.request_id = request_id
        logger = with_context(log, LogContext(request_id=request_id))

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = int((time.perf_counter() - started) * 1000)

        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level, "http.request %s %s %d %dms", request.method, request.url.path, response.status_code, elapsed_ms
        )

        response.headers[header_name] = request_id
        response.headers["X-Response-Time-Ms"] = str(elapsed_ms)
        return response
