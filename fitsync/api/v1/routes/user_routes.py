from fastapi import APIRouter, Depends

from fitsync.models.user import User
from fitsync.middlewares.clerk_auth import get_authenticated_user
from fitsync.core.logger import get_logger

logger = get_logger("user_routes")
router = APIRouter()

@router.get("/user/me", tags=["User"])
async def get_current_user(current_user: User = Depends(get_authenticated_user)):
    """Get current authenticated user's information"""

    return {
        "id": current_user.id,
        "email": current_user.email,
        "clerk_id": current_user.clerk_id,
        "type": current_user.type,
        "is_active": current_user.is_active,
        "created_at": current_user.created_at.isoformat() if current_user.created_at else None
    }
