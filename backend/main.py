import os
import time
from typing import List
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from prometheus_client import make_asgi_app
from api.routes import router
from api.websocket_routes import router as websocket_router
from api.game_store import game_store
from api.logging_config import configure_logging
from api.monitoring import (
    http_requests_total,
    http_request_duration_seconds,
)

VERSION = "1.0.0"
DEV_ORIGINS = [
    "http://localhost",
    "http://localhost:5173",
    "http://localhost:3000",
    "http://127.0.0.1",
    "http://127.0.0.1:5173",
    "http://127.0.0.1:3000",
]
# Paths that are neither logged nor counted
QUIET_PATHS = {"/", "/health", "/metrics"}

load_dotenv()

environment = os.getenv("ENVIRONMENT", "development")
logger = configure_logging(environment)


def cors_origins() -> List[str]:
    """Allowed origins from CORS_ORIGINS (comma-separated), or the local dev servers."""
    configured = os.getenv("CORS_ORIGINS", "")
    origins = [origin.strip() for origin in configured.split(",") if origin.strip()]
    return origins or DEV_ORIGINS


# In-memory rate limiting, applied to every HTTP route by SlowAPIMiddleware
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[os.getenv("RATE_LIMIT", "120/minute")],
    storage_uri="memory://",
)

app = FastAPI(title="Outbreak Game API", version=VERSION)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    """Log each API request and record its count and latency."""
    path = request.url.path
    if path in QUIET_PATHS or path.startswith("/metrics"):
        return await call_next(request)

    start_time = time.time()
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(
            "http_request_error",
            method=request.method,
            path=path,
            duration=time.time() - start_time,
            error=str(e),
        )
        raise

    duration = time.time() - start_time
    http_requests_total.labels(method=request.method, endpoint=path, status=response.status_code).inc()
    http_request_duration_seconds.labels(method=request.method, endpoint=path).observe(duration)
    logger.info(
        "http_request",
        method=request.method,
        path=path,
        status_code=response.status_code,
        duration=duration,
        client_ip=request.client.host if request.client else None,
    )
    return response


app.include_router(router, prefix="/api")
app.include_router(websocket_router, prefix="/api")
app.mount("/metrics", make_asgi_app())


@app.get("/")
async def root():
    return {"message": "Outbreak Game API", "version": VERSION}


@app.get("/health")
async def health():
    """Liveness check with the number of games held in memory."""
    return {"status": "healthy", "environment": environment, "games": game_store.count()}


@app.on_event("startup")
async def startup_event():
    logger.info("application_started", version=VERSION)


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("application_shutdown", games=game_store.count())
