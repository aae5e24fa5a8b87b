from fastapi import APIRouter, Depends

from app.db import Database
from app.dependencies.services import get_database
from app.schemas import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(database: Database | None = Depends(get_database)):
    """API health check endpoint, including database connectivity."""
    if database is None:
        db_status = "not configured"
    elif await database.check_connection():
        db_status = "ok"
    else:
        db_status = "unreachable"
    return HealthResponse(status="ok", database=db_status)
