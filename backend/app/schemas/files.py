"""
Pydantic schemas for file upload endpoints.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from uuid import UUID

from app.models.file_record import FileStatus


class UploadFileInput(BaseModel):
    """Declared metadata for one file."""
    name: str = Field(..., min_length=1, description="File name shown to the user")
    size: int = Field(..., gt=0, description="Size in bytes")
    type: str = Field(..., min_length=1, description="MIME type (e.g., 'image/png')")


class InitUploadRequest(BaseModel):
    """Request schema for batch upload initiation."""
    folder_id: UUID = Field(..., description="Target folder, must belong to the caller")
    files: List[UploadFileInput] = Field(..., min_length=1)

    class Config:
        json_schema_extra = {
            "example": {
                "folder_id": "550e8400-e29b-41d4-a716-446655440000",
                "files": [
                    {"name": "report.pdf", "size": 1048576, "type": "application/pdf"}
                ]
            }
        }


class UploadTicketResponse(BaseModel):
    """One presigned upload."""
    file_id: str = Field(..., description="File record ID")
    upload_url: str = Field(..., description="Presigned PUT URL for direct upload")
    expires_at: datetime = Field(..., description="When the upload URL stops working")


class InitUploadResponse(BaseModel):
    """Response schema for batch upload initiation, in request order."""
    uploads: List[UploadTicketResponse]


class FileRecordResponse(BaseModel):
    """Schema for a stored file record."""
    id: str
    folder_id: str
    file_name: str
    file_size: int
    file_type: str
    storage_key: str
    status: FileStatus
    checksum: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class FileListResponse(BaseModel):
    files: List[FileRecordResponse]
