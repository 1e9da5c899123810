"""
Batch upload initiation.

Flow:
1. Client sends a folder id and a list of file descriptors
2. Descriptors are validated (no side effects yet)
3. Folder ownership is checked against the database on every request
4. Per file, in input order: new file id -> storage key -> FileRecord with
   status="uploading" -> presigned PUT URL
5. Client uploads each file directly to R2 using its URL

A batch is not atomic. If a step fails mid-loop the records already
created stay in "uploading" and the whole request fails with
UploadBatchIncomplete naming them; callers reconcile by listing files.
"""
import logging
import time
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import List, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import (
    InvalidFolder,
    RecordNotReloaded,
    UploadBatchIncomplete,
    ValidationFailed,
    VaultixError,
)
from app.repositories.credential_store import CredentialStore
from app.storage.gateway import ObjectStorageGateway, build_storage_key
from app.utils.logging import log_upload_batch_failed, log_upload_batch_initiated
from app.utils.metrics import upload_files_initiated_total

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileDescriptor:
    """What the client declares about a file before uploading it."""
    name: str
    size: int
    type: str


@dataclass(frozen=True)
class UploadTicket:
    """Where and until when one file may be uploaded."""
    file_id: str
    storage_key: str
    upload_url: str
    expires_at: datetime


def validate_descriptors(files: Sequence[FileDescriptor]) -> None:
    """
    Reject a malformed batch before anything is written.

    Raises:
        ValidationFailed: On an empty batch, an empty name or type, or a
            non-positive size
    """
    if not files:
        raise ValidationFailed("At least one file is required")

    for index, descriptor in enumerate(files):
        if not isinstance(descriptor.name, str) or not descriptor.name.strip():
            raise ValidationFailed(f"File {index}: name must not be empty")
        if isinstance(descriptor.size, bool) or not isinstance(descriptor.size, int) or descriptor.size <= 0:
            raise ValidationFailed(f"File {index}: size must be a positive integer")
        if not isinstance(descriptor.type, str) or not descriptor.type.strip():
            raise ValidationFailed(f"File {index}: type must not be empty")


class UploadInitiator:
    """Creates file records and issues presigned upload URLs for a batch."""

    def __init__(self, db: AsyncSession, storage: ObjectStorageGateway, url_expiration: int):
        self.db = db
        self.storage = storage
        self.url_expiration = url_expiration

    async def init_batch(
        self,
        user_id: str,
        folder_id: str,
        files: Sequence[FileDescriptor]
    ) -> List[UploadTicket]:
        """
        Issue one upload URL per file, in input order.

        Args:
            user_id: Verified caller identity
            folder_id: Client-supplied target folder
            files: Declared name, size and MIME type per file

        Returns:
            One UploadTicket per descriptor

        Raises:
            ValidationFailed: Malformed batch (nothing written)
            InvalidFolder: Folder missing or owned by someone else (nothing written)
            UploadBatchIncomplete: A record or URL failed part-way through
        """
        start_time = time.time()

        validate_descriptors(files)

        folder = await CredentialStore.get_owned_folder(self.db, folder_id, user_id)
        if folder is None:
            raise InvalidFolder()

        tickets: List[UploadTicket] = []
        created_file_ids: List[str] = []

        for descriptor in files:
            file_id = str(uuid.uuid4())
            storage_key = build_storage_key(user_id, file_id)
            try:
                await CredentialStore.create_file_record(
                    self.db,
                    file_id=file_id,
                    user_id=user_id,
                    folder_id=folder.id,
                    file_name=descriptor.name,
                    file_size=descriptor.size,
                    file_type=descriptor.type,
                    storage_key=storage_key,
                    bucket_name=self.storage.bucket,
                )
                created_file_ids.append(file_id)

                presigned = self.storage.presign_upload(
                    storage_key,
                    descriptor.type,
                    expires_in=self.url_expiration,
                )
            except Exception as e:
                # Committed, only the read-back failed
                if isinstance(e, RecordNotReloaded) and file_id not in created_file_ids:
                    created_file_ids.append(file_id)
                message = e.message if isinstance(e, VaultixError) else "Unexpected downstream error"
                log_upload_batch_failed(
                    logger,
                    user_id=user_id,
                    folder_id=folder_id,
                    created_file_ids=created_file_ids,
                    error=str(e),
                )
                raise UploadBatchIncomplete(
                    f"Upload batch failed: {message}",
                    created_file_ids=created_file_ids,
                ) from e

            tickets.append(UploadTicket(
                file_id=file_id,
                storage_key=storage_key,
                upload_url=presigned.url,
                expires_at=presigned.expires_at,
            ))

        upload_files_initiated_total.inc(len(tickets))
        log_upload_batch_initiated(
            logger,
            user_id=user_id,
            folder_id=folder_id,
            file_count=len(tickets),
            duration_ms=(time.time() - start_time) * 1000,
        )
        return tickets
