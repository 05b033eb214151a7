"""
API v1 routes package.
"""

from .user_routes import router as user_router
from .health_routes import router as health_router
from .bluetooth_routes import router as bluetooth_router

__all__ = [
    "user_router",
    "health_router",
    "bluetooth_router",
]
