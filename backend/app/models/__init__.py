"""
Database models package.
"""
from app.models.base import Base
from app.models.user import User
from app.models.folder import Folder
from app.models.file_record import FileRecord, FileStatus

__all__ = [
    "Base",
    "User",
    "Folder",
    "FileRecord",
    "FileStatus",
]
