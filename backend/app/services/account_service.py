"""
Account provisioning and login.

Signup creates two rows, a user and that user's root folder. If the folder
cannot be created the user is deleted again before the error is returned;
an account without a root folder would break every later folder operation.
"""
import logging
import time
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.passwords import (
    burn_password_check,
    hash_password,
    password_too_long,
    verify_password,
)
from app.auth.tokens import TokenCodec
from app.errors import DuplicateAccount, InvalidCredentials, MissingField, ValidationFailed
from app.models.base import generate_uuid
from app.models.user import User
from app.repositories.credential_store import CredentialStore
from app.services.compensation import CompensationStack
from app.utils.logging import log_account_created, log_login_failed, log_login_succeeded
from app.utils.metrics import logins_total, signups_total

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    """A user together with a freshly issued session token."""
    user: User
    token: str


class AccountProvisioner:
    """Signup and login for credential-based accounts."""

    def __init__(self, db: AsyncSession, token_codec: TokenCodec, bcrypt_rounds: int):
        self.db = db
        self.token_codec = token_codec
        self.bcrypt_rounds = bcrypt_rounds

    async def signup(self, email: Optional[str], password: Optional[str], name: Optional[str] = None) -> AuthResult:
        """
        Create a user with a root folder and issue a token.

        Email is matched exactly as given (no case folding).

        Raises:
            MissingField: If email or password is absent
            ValidationFailed: If the password exceeds bcrypt's 72-byte limit
            DuplicateAccount: If the email is taken
            DownstreamFailure: If persistence fails; a created user is
                removed first
        """
        start_time = time.time()

        if not email or not password:
            raise MissingField("Email and password are required")
        if password_too_long(password):
            raise ValidationFailed("Password must be at most 72 bytes")

        # Fast path only; the unique index decides concurrent signups
        if await CredentialStore.get_user_by_email(self.db, email) is not None:
            raise DuplicateAccount("User already exists")

        password_hash = await hash_password(password, self.bcrypt_rounds)

        # Registered before the insert; a failed read-back still leaves a row
        user_id = generate_uuid()
        steps = CompensationStack("signup")
        steps.push("create_user", lambda: CredentialStore.delete_user(self.db, user_id))

        completed = False
        try:
            user = await CredentialStore.create_user(
                self.db,
                email=email,
                password_hash=password_hash,
                name=name,
                user_id=user_id,
            )
            await CredentialStore.create_root_folder(self.db, user_id)
            completed = True
        except DuplicateAccount:
            # Rejected by the unique index; nothing was written
            steps.clear()
            raise
        finally:
            if not completed:
                await steps.unwind()

        token = self.token_codec.issue(user.id, user.email)

        signups_total.inc()
        log_account_created(logger, user_id=user.id, duration_ms=(time.time() - start_time) * 1000)
        return AuthResult(user=user, token=token)

    async def login(self, email: Optional[str], password: Optional[str]) -> AuthResult:
        """
        Check credentials and issue a token.

        Unknown email and wrong password raise the same error with the same
        message, and both cost one bcrypt comparison.

        Raises:
            MissingField: If email or password is absent
            InvalidCredentials: On any credential mismatch
        """
        if not email or not password:
            raise MissingField("Email and password are required")

        user = await CredentialStore.get_user_by_email(self.db, email)

        if user is None:
            await burn_password_check(password, self.bcrypt_rounds)
            valid = False
        else:
            valid = await verify_password(password, user.password_hash)

        if not valid:
            logins_total.labels(outcome="invalid_credentials").inc()
            log_login_failed(logger)
            raise InvalidCredentials()

        token = self.token_codec.issue(user.id, user.email)

        logins_total.labels(outcome="success").inc()
        log_login_succeeded(logger, user_id=user.id)
        return AuthResult(user=user, token=token)
