"""FastAPI application factory"""

from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from tax_gateway.api.errors import register_exception_handlers
from tax_gateway.api.middleware import (
    BodySizeLimitMiddleware,
    MetricsMiddleware,
    RequestIDMiddleware,
    SecurityHeadersMiddleware,
)
from tax_gateway.api.rate_limit import SlidingWindowRateLimiter
from tax_gateway.api.v1 import chat, tax
from tax_gateway.domain.store import ResultStore
from tax_gateway.infrastructure.clients.gemini import GeminiClient
from tax_gateway.infrastructure.observability.logging import setup_logging
from tax_gateway.infrastructure.store.redis_store import RedisResultStore, create_redis_client
from tax_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)

# West Africa Time, no daylight saving
LAGOS_TZ = timezone(timedelta(hours=1), "WAT")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open a Redis-backed store unless one was injected, and close what we opened"""
    owned_store = None
    if app.state.result_store is None:
        owned_store = RedisResultStore(create_redis_client())
        app.state.result_store = owned_store

    yield

    if owned_store is not None:
        await owned_store.close()
        app.state.result_store = None


def create_app(result_store: ResultStore | None = None, chat_client: GeminiClient | None = None) -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Tax Gateway",
        description="Nigerian PAYE calculator with short-lived result storage and tax assistant chat",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.result_store = result_store
    app.state.chat_client = chat_client or GeminiClient()
    app.state.chat_rate_limiter = SlidingWindowRateLimiter(
        settings.chat_rate_limit_requests,
        settings.chat_rate_limit_window_seconds,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get("/", response_class=PlainTextResponse)
    def root():
        return "Tax Gateway is running"

    # Health check endpoint
    @app.get("/api/health")
    def health_check():
        return {
            "status": "OK",
            "service": settings.service_name,
            "timestamp": datetime.now(LAGOS_TZ).strftime("%b %d, %Y, %I:%M:%S %p"),
        }

    @app.get("/api/health/store")
    async def store_health_check(request: Request):
        store = request.app.state.result_store
        connected = store is not None and await store.ping()
        return {"status": "OK" if connected else "DEGRADED", "store": connected}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(tax.router, prefix="/api/v1/tax", tags=["tax"])
    app.include_router(chat.router, prefix="/api/v1", tags=["chat"])

    return app


app = create_app()
