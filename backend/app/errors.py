"""
Error taxonomy for the API.

Every error carries a stable machine-readable ``kind`` and the HTTP status
it maps to. The exception handler in ``app.main`` renders them as
``{"detail": message, "kind": kind, ...details}``.
"""
from typing import Any, Dict, Optional


class VaultixError(Exception):
    """Base class for all application errors."""

    kind = "Error"
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_response(self) -> Dict[str, Any]:
        return {"detail": self.message, "kind": self.kind, **self.details}


class MissingField(VaultixError):
    kind = "MissingField"
    status_code = 400


class DuplicateAccount(VaultixError):
    kind = "DuplicateAccount"
    status_code = 400


class ValidationFailed(VaultixError):
    kind = "ValidationFailed"
    status_code = 400


class InvalidCredentials(VaultixError):
    kind = "InvalidCredentials"
    status_code = 401

    def __init__(self):
        # Same message for unknown email and wrong password
        super().__init__("Invalid email or password")


class Unauthorized(VaultixError):
    kind = "Unauthorized"
    status_code = 401


class InvalidToken(VaultixError):
    """Raised by TokenCodec; surfaced to clients as Unauthorized."""
    kind = "Unauthorized"
    status_code = 401


class InvalidFolder(VaultixError):
    kind = "InvalidFolder"
    status_code = 404

    def __init__(self, message: str = "Folder not found or does not belong to user"):
        super().__init__(message)


class DownstreamFailure(VaultixError):
    kind = "DownstreamFailure"
    status_code = 500


class StorageError(DownstreamFailure):
    """Object storage call failed."""


class UploadBatchIncomplete(DownstreamFailure):
    """
    A batch failed part-way through.

    Records created before the failure are left in ``uploading`` state;
    their ids travel in ``details["created_file_ids"]``.
    """

    def __init__(self, message: str, created_file_ids: list):
        super().__init__(message, details={"created_file_ids": list(created_file_ids)})
        self.created_file_ids = list(created_file_ids)


class RecordNotReloaded(DownstreamFailure):
    """The row was committed but reading it back failed."""
