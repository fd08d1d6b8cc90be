"""
Room Admission API - Main Application Entry Point

Admits clients into capacity-bounded rooms:
- Race-free admission with one atomic Redis script per join
- Room-scoped, HttpOnly session cookies
- Token re-validation for protected calls
- Structured logging with request correlation
"""

from contextlib import asynccontextmanager
import redis.asyncio as redis
from redis.exceptions import RedisError
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from roomgate.core.config import get_settings
from roomgate.core.exceptions import AdmissionError
from roomgate.core.logging import setup_logging, get_logger
from roomgate.core.metrics import metrics_endpoint
from roomgate.api.router import api_router, page_router
from roomgate.api.middleware import RequestLoggingMiddleware, RoomAdmissionMiddleware
from roomgate.infrastructure.redis_client import RedisClient, get_redis
from roomgate.services.strategy_factory import build_admission_client

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        room_capacity=settings.ROOM_CAPACITY,
        admission_strategy=settings.ADMISSION_STRATEGY,
    )

    redis_client = RedisClient.get_client()
    app.state.admission_client = build_admission_client(redis_client, settings)

    yield

    await RedisClient.close()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Capacity-bounded room admission with race-free Redis coordination",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Custom middleware; the last one added runs first
app.add_middleware(RoomAdmissionMiddleware)
app.add_middleware(RequestLoggingMiddleware)

# Routes
app.include_router(api_router)
app.include_router(page_router)


@app.exception_handler(AdmissionError)
async def admission_error_handler(request: Request, exc: AdmissionError):
    """Store failures are operational errors; never leak store details."""
    return JSONResponse(
        status_code=503,
        content={"detail": "Service temporarily unavailable"},
    )


@app.get("/health", tags=["Health"])
async def health_check(client: redis.Redis = Depends(get_redis)):
    """Health check endpoint for Docker and load balancers."""
    try:
        await client.ping()
        store = "connected"
    except RedisError:
        store = "unavailable"
    return {
        "status": "healthy" if store == "connected" else "degraded",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "store": store,
    }


@app.get("/metrics", tags=["Health"])
def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }
