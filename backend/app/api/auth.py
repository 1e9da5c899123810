"""
Signup and login endpoints.
Both are on the auth gateway's allow-list.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_app_settings, get_token_codec
from app.auth.tokens import TokenCodec
from app.config import Settings
from app.database import get_db
from app.schemas.auth import (
    LoginRequest,
    LoginResponse,
    SignupRequest,
    SignupResponse,
    UserResponse,
)
from app.services.account_service import AccountProvisioner

router = APIRouter()


def get_account_provisioner(
    db: AsyncSession = Depends(get_db),
    token_codec: TokenCodec = Depends(get_token_codec),
    settings: Settings = Depends(get_app_settings)
) -> AccountProvisioner:
    return AccountProvisioner(db, token_codec, settings.bcrypt_rounds)


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    request: SignupRequest,
    provisioner: AccountProvisioner = Depends(get_account_provisioner)
):
    """
    Create an account and its root folder, then return a session token.
    Returns 400 on missing fields or an email that is already registered.
    """
    result = await provisioner.signup(request.email, request.password, request.name)
    return SignupResponse(
        user=UserResponse.model_validate(result.user),
        token=result.token
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    provisioner: AccountProvisioner = Depends(get_account_provisioner)
):
    """
    Exchange email and password for a session token.
    Returns 401 with the same body for unknown email and wrong password.
    """
    result = await provisioner.login(request.email, request.password)
    return LoginResponse(
        success=True,
        user=UserResponse.model_validate(result.user),
        token=result.token
    )
