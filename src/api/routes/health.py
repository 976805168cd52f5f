from fastapi import APIRouter

from src.infrastructure.database.connection import ping_database

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict:  # type: ignore[type-arg]
    """Liveness + database health check."""
    db_status = await ping_database()
    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "database": db_status,
    }
