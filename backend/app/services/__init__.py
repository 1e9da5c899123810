"""
Business logic services.
"""
from app.services.account_service import AccountProvisioner, AuthResult
from app.services.compensation import CompensationStack
from app.services.folder_service import FolderService
from app.services.upload_service import FileDescriptor, UploadInitiator, UploadTicket

__all__ = [
    "AccountProvisioner",
    "AuthResult",
    "CompensationStack",
    "FolderService",
    "FileDescriptor",
    "UploadInitiator",
    "UploadTicket",
]
