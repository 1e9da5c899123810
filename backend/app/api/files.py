"""
File upload endpoints.

Implements the direct-to-storage upload flow:
1. POST /files/init-upload - create records and get presigned URLs
2. Client PUTs each file straight to R2
3. GET /files - list records (used to reconcile a failed batch)

Security:
- All endpoints require a verified session token
- The owner is always the token's user, never a body or header field
- Folder ownership is checked on every request
- Presigned URLs expire after 24 hours (configurable)
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_app_settings, get_current_identity, get_storage_gateway
from app.auth.gateway import Identity
from app.config import Settings
from app.database import get_db
from app.errors import InvalidFolder
from app.models.file_record import FileStatus
from app.repositories.credential_store import CredentialStore
from app.schemas.files import (
    FileListResponse,
    FileRecordResponse,
    InitUploadRequest,
    InitUploadResponse,
    UploadTicketResponse,
)
from app.services.upload_service import FileDescriptor, UploadInitiator
from app.storage.gateway import ObjectStorageGateway

router = APIRouter()


@router.post("/init-upload", response_model=InitUploadResponse)
async def init_upload(
    request: InitUploadRequest,
    db: AsyncSession = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
    storage: ObjectStorageGateway = Depends(get_storage_gateway),
    settings: Settings = Depends(get_app_settings)
):
    """
    Create a file record and a presigned PUT URL for each file.

    Returns 400 on a malformed body, 404 if the folder is not the caller's,
    500 if storage or the database fails. A 500 after some records were
    created lists their ids in created_file_ids; those stay "uploading".
    """
    initiator = UploadInitiator(db, storage, settings.upload_url_expiration)
    tickets = await initiator.init_batch(
        user_id=identity.user_id,
        folder_id=str(request.folder_id),
        files=[
            FileDescriptor(name=f.name, size=f.size, type=f.type)
            for f in request.files
        ]
    )
    return InitUploadResponse(uploads=[
        UploadTicketResponse(
            file_id=ticket.file_id,
            upload_url=ticket.upload_url,
            expires_at=ticket.expires_at
        )
        for ticket in tickets
    ])


@router.get("", response_model=FileListResponse)
async def list_files(
    folder_id: Optional[UUID] = None,
    status: Optional[FileStatus] = None,
    db: AsyncSession = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    """
    List the caller's file records, optionally by folder and status.
    """
    if folder_id is not None:
        folder = await CredentialStore.get_owned_folder(db, str(folder_id), identity.user_id)
        if folder is None:
            raise InvalidFolder()

    records = await CredentialStore.list_file_records(
        db,
        user_id=identity.user_id,
        folder_id=str(folder_id) if folder_id else None,
        status=status
    )
    return FileListResponse(files=[FileRecordResponse.model_validate(r) for r in records])
