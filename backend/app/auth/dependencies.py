"""
FastAPI dependencies for authentication and shared services.

Identity comes only from ``request.state.identity``, set by
AuthGatewayMiddleware after token verification.
"""
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.gateway import Identity
from app.auth.tokens import TokenCodec
from app.config import Settings
from app.database import get_db
from app.errors import Unauthorized
from app.models.user import User
from app.repositories.credential_store import CredentialStore
from app.storage.gateway import ObjectStorageGateway


def get_app_settings(request: Request) -> Settings:
    """Settings built once at startup by create_app."""
    return request.app.state.settings


def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


def get_storage_gateway(request: Request) -> ObjectStorageGateway:
    return request.app.state.storage_gateway


def get_current_identity(request: Request) -> Identity:
    """
    Return the identity attached by the auth gateway.

    Raises:
        Unauthorized: If the request did not pass through the gateway
    """
    identity = getattr(request.state, "identity", None)
    if not isinstance(identity, Identity):
        raise Unauthorized("Authentication required")
    return identity


async def get_current_user(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Load the User behind a verified identity.

    Raises:
        Unauthorized: If the account behind a still-valid token is gone
    """
    user = await CredentialStore.get_user_by_id(db, identity.user_id)
    if user is None:
        raise Unauthorized("Account no longer exists")
    return user
