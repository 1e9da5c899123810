"""
Folder service for creating folders below a user's root.
"""
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import InvalidFolder, ValidationFailed
from app.models.folder import Folder
from app.repositories.credential_store import CredentialStore


class FolderService:
    """Service for folder business logic."""

    @staticmethod
    async def get_root_folder(db: AsyncSession, user_id: str) -> Folder:
        """
        Raises:
            InvalidFolder: If the user has no root folder
        """
        folder = await CredentialStore.get_root_folder(db, user_id)
        if folder is None:
            raise InvalidFolder("Root folder not found")
        return folder

    @staticmethod
    async def create_folder(
        db: AsyncSession,
        user_id: str,
        name: Optional[str],
        parent_id: Optional[str] = None
    ) -> Folder:
        """
        Create a folder. Root folders are only created at signup, so a
        missing parent means "directly under the root".

        Raises:
            ValidationFailed: If the name is empty after trimming
            InvalidFolder: If the parent is missing or not owned by the user
        """
        if not name or not name.strip():
            raise ValidationFailed("Folder name is required")

        if parent_id is None:
            parent = await FolderService.get_root_folder(db, user_id)
        else:
            parent = await CredentialStore.get_owned_folder(db, parent_id, user_id)
            if parent is None:
                raise InvalidFolder()

        return await CredentialStore.create_folder(
            db,
            user_id=user_id,
            name=name.strip(),
            parent_id=parent.id,
        )
