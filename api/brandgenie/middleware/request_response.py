"""Request/Response middleware for consistent API behavior.

Assigns every request an id (honouring an incoming ``X-Request-ID``), makes
it available to log records through a context variable, times the request,
and logs one line on the way in and one on the way out.
"""

from __future__ import annotations

import time
from typing import Callable
from uuid import uuid4

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from ..core.structured_logging import LoggerFactory, request_id_var

logger = LoggerFactory.get_logger(__name__)


class RequestResponseMiddleware(BaseHTTPMiddleware):
    """Middleware for consistent request/response handling."""

    def __init__(
        self,
        app: ASGIApp,
        log_requests: bool = True,
        log_responses: bool = True,
        include_processing_time: bool = True,
        max_request_size: int = 10 * 1024 * 1024,  # 10MB
    ):
        super().__init__(app)
        self.log_requests = log_requests
        self.log_responses = log_responses
        self.include_processing_time = include_processing_time
        self.max_request_size = max_request_size

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)
        start_time = time.time()

        try:
            if self.log_requests:
                logger.info(
                    f"Incoming request: {request.method} {request.url.path}",
                    method=request.method,
                    path=request.url.path,
                    client_ip=request.client.host if request.client else "unknown",
                )

            content_length = request.headers.get("content-length")
            if content_length and content_length.isdigit() and int(content_length) > self.max_request_size:
                response = JSONResponse(
                    status_code=413,
                    content={
                        "error": "RequestTooLarge",
                        "message": f"Request size {content_length} exceeds maximum {self.max_request_size} bytes",
                    },
                )
            else:
                response = await call_next(request)

            processing_time_ms = int((time.time() - start_time) * 1000)
            response.headers["X-Request-ID"] = request_id
            if self.include_processing_time:
                response.headers["X-Processing-Time-Ms"] = str(processing_time_ms)

            if self.log_responses:
                self._log_response(request, response, processing_time_ms)
            return response
        finally:
            request_id_var.reset(token)

    def _log_response(self, request: Request, response: Response, processing_time_ms: int) -> None:
        if response.status_code >= 500:
            log = logger.error
            label = "Server error response"
        elif response.status_code >= 400:
            log = logger.warning
            label = "Client error response"
        else:
            log = logger.info
            label = "Successful response"

        log(
            f"{label}: {response.status_code} for {request.method} {request.url.path} ({processing_time_ms}ms)",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            processing_time_ms=processing_time_ms,
        )

