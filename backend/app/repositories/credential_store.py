"""
Repository for users, folders and file records.

Every write commits immediately: orchestration above this layer spans an
external object store, so there is no single transaction to hold open.
Database errors are rolled back and re-raised as DownstreamFailure. A row
that was committed but could not be read back raises RecordNotReloaded, so
callers know it exists.
"""
import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import DownstreamFailure, DuplicateAccount, RecordNotReloaded
from app.models.base import generate_uuid
from app.models.file_record import FileRecord, FileStatus
from app.models.folder import Folder, ROOT_FOLDER_NAME
from app.models.user import User

logger = logging.getLogger(__name__)


async def _reload(db: AsyncSession, instance, what: str):
    try:
        await db.refresh(instance)
    except SQLAlchemyError as e:
        logger.error(f"Created {what} could not be reloaded: {e}")
        await db.rollback()
        raise RecordNotReloaded(f"Failed to create {what}") from e
    return instance


async def _commit_new(db: AsyncSession, instance, what: str):
    db.add(instance)
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Failed to create {what}: {e}")
        raise DownstreamFailure(f"Failed to create {what}") from e
    return await _reload(db, instance, what)


class CredentialStore:
    """Persistence for User, Folder and FileRecord."""

    # Users

    @staticmethod
    async def create_user(
        db: AsyncSession,
        email: str,
        password_hash: str,
        name: Optional[str] = None,
        user_id: Optional[str] = None
    ) -> User:
        """
        Insert a user.

        The unique index on email is the final arbiter for concurrent
        signups; losing that race surfaces as DuplicateAccount.
        Callers that must undo the insert pass their own user_id so they
        know it before anything is written.

        Raises:
            DuplicateAccount: If the email is already taken
            DownstreamFailure: On any other database error
            RecordNotReloaded: If the user was committed but not read back
        """
        user = User(
            id=user_id or generate_uuid(),
            email=email,
            password_hash=password_hash,
            name=name or None,
        )
        db.add(user)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.info("User insert rejected by unique constraint")
            raise DuplicateAccount("User already exists") from e
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to create user: {e}")
            raise DownstreamFailure("Failed to create user") from e
        return await _reload(db, user, "user")

    @staticmethod
    async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
        """Exact-match lookup. Returns None when no user has this email."""
        try:
            result = await db.execute(select(User).where(User.email == email).limit(1))
        except SQLAlchemyError as e:
            logger.error(f"User lookup failed: {e}")
            raise DownstreamFailure("Failed to look up user") from e
        return result.scalar_one_or_none()

    @staticmethod
    async def get_user_by_id(db: AsyncSession, user_id: str) -> Optional[User]:
        try:
            result = await db.execute(select(User).where(User.id == user_id))
        except SQLAlchemyError as e:
            logger.error(f"User lookup failed: {e}")
            raise DownstreamFailure("Failed to look up user") from e
        return result.scalar_one_or_none()

    @staticmethod
    async def delete_user(db: AsyncSession, user_id: str) -> None:
        """
        Remove a user and everything it owns. Used only to undo a failed
        signup, where at most the root folder exists.
        """
        try:
            await db.execute(delete(FileRecord).where(FileRecord.user_id == user_id))
            await db.execute(delete(Folder).where(Folder.user_id == user_id))
            await db.execute(delete(User).where(User.id == user_id))
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise DownstreamFailure(f"Failed to delete user {user_id}") from e

    # Folders

    @staticmethod
    async def create_root_folder(db: AsyncSession, user_id: str) -> Folder:
        folder = Folder(
            user_id=user_id,
            name=ROOT_FOLDER_NAME,
            parent_id=None,
            is_root=True,
        )
        return await _commit_new(db, folder, "root folder")

    @staticmethod
    async def get_root_folder(db: AsyncSession, user_id: str) -> Optional[Folder]:
        try:
            result = await db.execute(
                select(Folder).where(
                    Folder.user_id == user_id,
                    Folder.is_root.is_(True)
                )
            )
        except SQLAlchemyError as e:
            raise DownstreamFailure("Failed to look up root folder") from e
        return result.scalar_one_or_none()

    @staticmethod
    async def get_owned_folder(db: AsyncSession, folder_id: str, user_id: str) -> Optional[Folder]:
        """
        Get folder by ID, ensuring it belongs to the user.
        Returns None if folder not found or doesn't belong to user.
        """
        try:
            result = await db.execute(
                select(Folder).where(
                    Folder.id == folder_id,
                    Folder.user_id == user_id
                )
            )
        except SQLAlchemyError as e:
            raise DownstreamFailure("Failed to look up folder") from e
        return result.scalar_one_or_none()

    @staticmethod
    async def create_folder(db: AsyncSession, user_id: str, name: str, parent_id: str) -> Folder:
        folder = Folder(user_id=user_id, name=name, parent_id=parent_id, is_root=False)
        return await _commit_new(db, folder, "folder")

    # File records

    @staticmethod
    async def create_file_record(
        db: AsyncSession,
        file_id: str,
        user_id: str,
        folder_id: str,
        file_name: str,
        file_size: int,
        file_type: str,
        storage_key: str,
        bucket_name: str
    ) -> FileRecord:
        """Insert a file record in ``uploading`` state."""
        record = FileRecord(
            id=file_id,
            user_id=user_id,
            folder_id=folder_id,
            file_name=file_name,
            file_size=file_size,
            file_type=file_type,
            storage_key=storage_key,
            bucket_name=bucket_name,
            status=FileStatus.UPLOADING,
            checksum=None,
        )
        return await _commit_new(db, record, "file record")

    @staticmethod
    async def list_file_records(
        db: AsyncSession,
        user_id: str,
        folder_id: Optional[str] = None,
        status: Optional[FileStatus] = None
    ) -> List[FileRecord]:
        """
        A user's file records, oldest first.

        This is how callers reconcile a failed batch: records it created
        remain listed with status ``uploading``.
        """
        query = select(FileRecord).where(FileRecord.user_id == user_id)
        if folder_id is not None:
            query = query.where(FileRecord.folder_id == folder_id)
        if status is not None:
            query = query.where(FileRecord.status == status)
        try:
            result = await db.execute(query.order_by(FileRecord.created_at, FileRecord.id))
        except SQLAlchemyError as e:
            raise DownstreamFailure("Failed to list files") from e
        return list(result.scalars().all())
