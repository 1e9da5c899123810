"""
FileRecord model for tracking uploads.

Stores metadata about files uploaded to R2 storage.
The actual file bytes are stored in R2, not the database.

Lifecycle:
1. Client requests upload URLs -> status="uploading" (record created
   before the URL is issued)
2. Client uploads to R2 directly
3. A completion callback moves the record to "complete" or "failed".
   Without that callback the record stays "uploading".
"""
import enum
from sqlalchemy import Column, String, Enum, BigInteger, DateTime, ForeignKey, Index
from sqlalchemy.sql import func

from app.models.base import Base, generate_uuid


class FileStatus(str, enum.Enum):
    """Upload status of a file."""
    UPLOADING = "uploading"  # Presigned URL issued, awaiting upload
    COMPLETE = "complete"
    FAILED = "failed"


class FileRecord(Base):
    """
    File metadata model.

    Attributes:
        id: Unique identifier (UUID), generated before the storage key
        user_id: Owner
        folder_id: Containing folder (ownership checked on creation)
        file_name: Client-declared name, never used to build the storage key
        file_size: Client-declared size in bytes
        file_type: Client-declared MIME type
        storage_key: users/{user_id}/files/{file_id}
        bucket_name: Bucket the key lives in
        status: uploading, complete or failed
        checksum: Optional content checksum
    """
    __tablename__ = "files"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    folder_id = Column(String(36), ForeignKey("folders.id"), nullable=False, index=True)

    file_name = Column(String(1024), nullable=False)
    file_size = Column(BigInteger, nullable=False)
    file_type = Column(String(255), nullable=False)

    storage_key = Column(String(1024), nullable=False, unique=True)
    bucket_name = Column(String(255), nullable=False)

    status = Column(
        Enum(
            FileStatus,
            name="filestatus",
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=FileStatus.UPLOADING
    )
    checksum = Column(String(128), nullable=True)

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    __table_args__ = (
        # Reconciliation listing: a user's records by status
        Index("ix_files_user_status", "user_id", "status"),
    )

    def __repr__(self):
        return (
            f"<FileRecord(id={self.id}, user={self.user_id}, "
            f"folder={self.folder_id}, status={self.status.value})>"
        )
