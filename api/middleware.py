"""
Request tracing for the status API
"""

import logging
import time
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with an id (taken from the caller's ``X-Request-ID``
    when present) and reports its latency in the response headers and log.
    """

    async def dispatch(self, request: Request, call_next):
        request.state.request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        started = time.perf_counter()

        response: Response = await call_next(request)

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        response.headers[REQUEST_ID_HEADER] = request.state.request_id
        response.headers["X-API-Latency-ms"] = str(elapsed_ms)

        logger.info(
            f"[{request.state.request_id}] {request.method} {request.url.path} "
            f"-> {response.status_code} in {elapsed_ms}ms"
        )
        return response
