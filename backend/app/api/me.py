"""
User profile endpoint.
Returns information about the authenticated user.
"""
from fastapi import APIRouter, Depends

from app.auth.dependencies import get_current_user
from app.models.user import User
from app.schemas.auth import MeResponse, UserProfileResponse

router = APIRouter()


@router.get("", response_model=MeResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """
    Profile of the caller identified by the verified session token.
    """
    return MeResponse(user=UserProfileResponse.model_validate(current_user))
