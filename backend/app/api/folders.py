"""
Folder endpoints.
All endpoints require a verified session token.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_identity
from app.auth.gateway import Identity
from app.database import get_db
from app.schemas.folder import FolderCreate, FolderResponse
from app.services.folder_service import FolderService

router = APIRouter()


@router.get("/root", response_model=FolderResponse)
async def get_root_folder(
    db: AsyncSession = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    """Return the caller's root folder."""
    folder = await FolderService.get_root_folder(db, identity.user_id)
    return FolderResponse.model_validate(folder)


@router.post("", response_model=FolderResponse, status_code=status.HTTP_201_CREATED)
async def create_folder(
    folder_data: FolderCreate,
    db: AsyncSession = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    """
    Create a folder under parent_id, or under the root folder if omitted.
    Returns 404 if the parent does not belong to the caller.
    """
    folder = await FolderService.create_folder(
        db,
        user_id=identity.user_id,
        name=folder_data.name,
        parent_id=str(folder_data.parent_id) if folder_data.parent_id else None
    )
    return FolderResponse.model_validate(folder)
