"""Health check endpoint for load balancers: reports user-store connectivity."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import check_db_connected, get_db
from app.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(db: Annotated[Session, Depends(get_db)]) -> HealthResponse:
    """Return service status and whether the user store answers a trivial query."""
    return HealthResponse(
        status="ok",
        service="auth",
        environment=settings.APP_ENV,
        database="connected" if check_db_connected(db) else "disconnected",
    )
