"""
Pydantic schemas for API request/response validation.
"""
from app.schemas.auth import (
    SignupRequest,
    SignupResponse,
    LoginRequest,
    LoginResponse,
    MeResponse,
    UserResponse,
)
from app.schemas.files import (
    InitUploadRequest,
    InitUploadResponse,
    FileListResponse,
)
from app.schemas.folder import (
    FolderCreate,
    FolderResponse,
)

__all__ = [
    "SignupRequest",
    "SignupResponse",
    "LoginRequest",
    "LoginResponse",
    "MeResponse",
    "UserResponse",
    "InitUploadRequest",
    "InitUploadResponse",
    "FileListResponse",
    "FolderCreate",
    "FolderResponse",
]
