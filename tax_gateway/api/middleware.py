"""FastAPI middleware for request tracing, metrics, and transport hardening"""

import uuid
import time
from fastapi import HTTPException
from starlette.datastructures import Headers
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send
from tax_gateway.infrastructure.observability.logging import log_request
from tax_gateway.infrastructure.observability.metrics import request_duration_histogram

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "cross-origin",
}

BODY_TOO_LARGE_MESSAGE = "Request body too large!"
UNMATCHED_ENDPOINT = "unmatched"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Add unique request ID to each request for distributed tracing"""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record HTTP request metrics and one access log line per request"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        response = await call_next(request)

        duration = time.time() - start_time
        # Route template keeps calculation ids and stray 404 paths out of the labels
        route = request.scope.get("route")
        endpoint = getattr(route, "path", UNMATCHED_ENDPOINT)
        request_duration_histogram.labels(
            method=request.method,
            endpoint=endpoint,
            status=response.status_code,
        ).observe(duration)

        log_request(
            getattr(request.state, "request_id", "unknown"),
            request.method,
            request.url.path,
            response.status_code,
            duration * 1000,
        )

        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Set hardening headers on every response"""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers[header] = value
        return response


class BodySizeLimitMiddleware:
    """
    Reject request bodies larger than `max_body_bytes`.

    A declared Content-Length over the limit is refused up front. Bodies
    without one (chunked uploads) are counted as they arrive, and reading
    past the limit raises a 413 inside the endpoint.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int):
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = Headers(scope=scope).get("content-length")
        if content_length is not None:
            try:
                too_large = int(content_length) > self.max_body_bytes
            except ValueError:
                response = JSONResponse(status_code=400, content={"success": False, "message": "Invalid Content-Length header!"})
                await response(scope, receive, send)
                return
            if too_large:
                response = JSONResponse(status_code=413, content={"success": False, "message": BODY_TOO_LARGE_MESSAGE})
                await response(scope, receive, send)
                return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes:
                    raise HTTPException(status_code=413, detail=BODY_TOO_LARGE_MESSAGE)
            return message

        await self.app(scope, limited_receive, send)
