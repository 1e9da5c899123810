"""
Repository layer for database operations.
"""
from app.repositories.credential_store import CredentialStore

__all__ = ["CredentialStore"]
