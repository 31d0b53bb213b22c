"""Dependency injection for FastAPI endpoints"""

import math
from typing import Optional
from fastapi import HTTPException, Request, Response

from tax_gateway.api.rate_limit import RateLimitExceeded, SlidingWindowRateLimiter
from tax_gateway.domain.store import ResultStore
from tax_gateway.infrastructure.clients.gemini import GeminiClient
from tax_gateway.infrastructure.observability.metrics import chat_request_counter

CHAT_RATE_LIMIT_MESSAGE = "Too many chat requests from this IP. Please try again after 5 minutes."


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_optional_result_store(request: Request) -> Optional[ResultStore]:
    """Result store if one is configured; saving treats None as unavailable"""
    return getattr(request.app.state, "result_store", None)


def get_result_store(request: Request) -> ResultStore:
    """Result store for reads, which must fail loudly when none is configured"""
    store = get_optional_result_store(request)
    if store is None:
        raise HTTPException(status_code=503, detail="Result store unavailable")
    return store


def get_chat_client(request: Request) -> GeminiClient:
    """Provide the LLM client owned by the application"""
    return request.app.state.chat_client


def enforce_chat_rate_limit(request: Request, response: Response) -> None:
    """Reject the request when its client IP exceeded the chat budget"""
    limiter: SlidingWindowRateLimiter = request.app.state.chat_rate_limiter
    client_ip = request.client.host if request.client else "unknown"

    retry_after = limiter.hit(client_ip)
    if retry_after is not None:
        chat_request_counter.labels(outcome="rate_limited").inc()
        raise RateLimitExceeded(retry_after=math.ceil(retry_after), message=CHAT_RATE_LIMIT_MESSAGE)

    response.headers["RateLimit-Limit"] = str(limiter.max_requests)
    response.headers["RateLimit-Remaining"] = str(limiter.remaining(client_ip))
