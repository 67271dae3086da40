"""Middleware for HTTP error logging."""

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from assetbroker.core.logging import asset_id_context

logger = logging.getLogger(__name__)

ASSET_PATH_PREFIX = "/asset/"


class HTTPErrorLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to ensure all HTTP errors are logged.

    - 4xx responses: logged at WARN level
    - 5xx responses: logged at ERROR level

    The asset id from the path is put in the logging context for the
    duration of the request.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()

        asset_id = None
        path = request.url.path
        if path.startswith(ASSET_PATH_PREFIX):
            asset_id = path[len(ASSET_PATH_PREFIX):] or None
        token = asset_id_context.set(asset_id)

        try:
            response = await call_next(request)
        finally:
            asset_id_context.reset(token)

        duration_ms = (time.time() - start_time) * 1000
        details = {
            "http_status": response.status_code,
            "method": request.method,
            "path": path,
            "asset_id": asset_id,
            "duration_ms": duration_ms,
        }

        if 400 <= response.status_code < 500:
            logger.warning("Client error response", extra=details)
        elif response.status_code >= 500:
            logger.error("Server error response", extra=details)

        return response
