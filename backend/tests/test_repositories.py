"""
Tests for the CredentialStore repository.
"""
import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import DownstreamFailure, DuplicateAccount
from app.models.file_record import FileStatus
from app.models.folder import Folder
from app.models.user import User
from app.repositories.credential_store import CredentialStore


class TestUsers:
    """Tests for user persistence."""

    @pytest.mark.asyncio
    async def test_create_and_find_by_email(self, db_session: AsyncSession):
        """Test a created user is found by its exact email."""
        user = await CredentialStore.create_user(db_session, email="a@x.com", password_hash="hash")

        found = await CredentialStore.get_user_by_email(db_session, "a@x.com")
        assert found is not None
        assert found.id == user.id
        assert found.is_email_verified is False

    @pytest.mark.asyncio
    async def test_email_lookup_is_exact(self, db_session: AsyncSession):
        """Test lookup does not fold case."""
        await CredentialStore.create_user(db_session, email="a@x.com", password_hash="hash")

        assert await CredentialStore.get_user_by_email(db_session, "A@X.COM") is None

    @pytest.mark.asyncio
    async def test_missing_email_returns_none(self, db_session: AsyncSession):
        """Test unknown email is a benign None, not an error."""
        assert await CredentialStore.get_user_by_email(db_session, "nobody@x.com") is None

    @pytest.mark.asyncio
    async def test_unique_constraint_is_final_arbiter(self, db_session: AsyncSession):
        """Test a second insert with the same email fails at the database."""
        await CredentialStore.create_user(db_session, email="a@x.com", password_hash="hash")

        with pytest.raises(DuplicateAccount):
            await CredentialStore.create_user(db_session, email="a@x.com", password_hash="other")

    @pytest.mark.asyncio
    async def test_delete_user(self, db_session: AsyncSession):
        """Test a deleted user can no longer be found."""
        user = await CredentialStore.create_user(db_session, email="a@x.com", password_hash="hash")

        await CredentialStore.delete_user(db_session, user.id)

        assert await CredentialStore.get_user_by_id(db_session, user.id) is None

    @pytest.mark.asyncio
    async def test_delete_user_removes_owned_rows(self, db_session: AsyncSession):
        """Test deleting a user also removes its folders and file records."""
        user = await CredentialStore.create_user(db_session, email="a@x.com", password_hash="hash")
        root = await CredentialStore.create_root_folder(db_session, user.id)
        await CredentialStore.create_file_record(
            db_session,
            file_id=str(uuid.uuid4()),
            user_id=user.id,
            folder_id=root.id,
            file_name="a.txt",
            file_size=1,
            file_type="text/plain",
            storage_key=f"users/{user.id}/files/x",
            bucket_name="vaultix-test",
        )

        await CredentialStore.delete_user(db_session, user.id)

        assert await CredentialStore.get_root_folder(db_session, user.id) is None
        assert await CredentialStore.list_file_records(db_session, user.id) == []

    @pytest.mark.asyncio
    async def test_create_user_with_given_id(self, db_session: AsyncSession):
        user_id = str(uuid.uuid4())

        user = await CredentialStore.create_user(db_session, email="a@x.com", password_hash="hash", user_id=user_id)

        assert user.id == user_id


class TestFolders:
    """Tests for folder persistence."""

    @pytest.mark.asyncio
    async def test_create_root_folder(self, db_session: AsyncSession):
        """Test root folder shape."""
        user = await CredentialStore.create_user(db_session, email="a@x.com", password_hash="hash")

        folder = await CredentialStore.create_root_folder(db_session, user.id)

        assert folder.is_root is True
        assert folder.parent_id is None
        assert folder.name == "root"
        root = await CredentialStore.get_root_folder(db_session, user.id)
        assert root.id == folder.id

    @pytest.mark.asyncio
    async def test_second_root_folder_rejected(self, db_session: AsyncSession, test_user: User):
        """Test the database allows one root folder per user."""
        with pytest.raises(DownstreamFailure):
            await CredentialStore.create_root_folder(db_session, test_user.id)

    @pytest.mark.asyncio
    async def test_owned_folder_checks_owner(
        self,
        db_session: AsyncSession,
        test_user: User,
        other_root_folder: Folder
    ):
        """Test another user's folder is not returned."""
        assert await CredentialStore.get_owned_folder(db_session, other_root_folder.id, test_user.id) is None

    @pytest.mark.asyncio
    async def test_owned_folder_found(self, db_session: AsyncSession, test_user: User, test_root_folder: Folder):
        folder = await CredentialStore.get_owned_folder(db_session, test_root_folder.id, test_user.id)
        assert folder is not None
        assert folder.id == test_root_folder.id


class TestFileRecords:
    """Tests for file record persistence."""

    @pytest.mark.asyncio
    async def test_create_and_list(self, db_session: AsyncSession, test_user: User, test_root_folder: Folder):
        """Test a new record starts as uploading and is listed."""
        file_id = str(uuid.uuid4())
        record = await CredentialStore.create_file_record(
            db_session,
            file_id=file_id,
            user_id=test_user.id,
            folder_id=test_root_folder.id,
            file_name="notes.txt",
            file_size=12,
            file_type="text/plain",
            storage_key=f"users/{test_user.id}/files/{file_id}",
            bucket_name="vaultix-test",
        )

        assert record.id == file_id
        assert record.status == FileStatus.UPLOADING
        assert record.checksum is None

        listed = await CredentialStore.list_file_records(db_session, test_user.id, status=FileStatus.UPLOADING)
        assert [r.id for r in listed] == [file_id]
        assert await CredentialStore.list_file_records(db_session, test_user.id, status=FileStatus.COMPLETE) == []

    @pytest.mark.asyncio
    async def test_list_is_scoped_to_user(
        self,
        db_session: AsyncSession,
        test_user: User,
        other_user: User,
        other_root_folder: Folder
    ):
        """Test one user's records are not listed for another."""
        file_id = str(uuid.uuid4())
        await CredentialStore.create_file_record(
            db_session,
            file_id=file_id,
            user_id=other_user.id,
            folder_id=other_root_folder.id,
            file_name="secret.pdf",
            file_size=100,
            file_type="application/pdf",
            storage_key=f"users/{other_user.id}/files/{file_id}",
            bucket_name="vaultix-test",
        )

        assert await CredentialStore.list_file_records(db_session, test_user.id) == []
