"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import rpc
from app.api.v1 import router as v1_router
from app.core.config import settings
from app.core.logging_config import configure_logging

configure_logging(settings)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Auth API",
    description="User accounts, login and token validation.",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
    allow_headers=["Origin", "Content-Length", "Content-Type", "Authorization"],
    expose_headers=["Content-Length"],
    max_age=12 * 3600,
)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)
app.include_router(rpc.router, tags=["rpc"])

logger.info("Auth API configured", extra={"environment": settings.APP_ENV})


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Auth API"}
