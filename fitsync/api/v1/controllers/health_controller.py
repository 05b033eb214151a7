"""
Health Check Controller
"""
from fastapi import Request

from fitsync.core.config import settings


async def health_check(request: Request):
    """Service liveness and database connectivity."""
    database_ok = await request.app.state.database.ping()
    return {
        "status": "OK" if database_ok else "DEGRADED",
        "database": "connected" if database_ok else "disconnected",
        "environment": settings.ENVIRONMENT
    }
