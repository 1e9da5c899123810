"""
Password hashing with bcrypt.

bcrypt is slow on purpose, so every call runs in a worker thread to keep the
event loop free for other requests.
"""
import asyncio
from functools import lru_cache

import bcrypt

# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def _hash(password: str, rounds: int) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def _check(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash or over-long password
        return False


@lru_cache(maxsize=None)
def _dummy_hash(rounds: int) -> str:
    return _hash("vaultix-dummy-password", rounds)


def _burn(password: str, rounds: int) -> None:
    _check(password, _dummy_hash(rounds))


async def hash_password(password: str, rounds: int) -> str:
    """Hash a password with a fresh salt at the given cost factor."""
    return await asyncio.to_thread(_hash, password, rounds)


async def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time check of a password against a stored bcrypt hash."""
    return await asyncio.to_thread(_check, password, password_hash)


async def burn_password_check(password: str, rounds: int) -> None:
    """
    Spend one bcrypt comparison at the given cost with nothing to match.

    Used when the email is unknown, so a failed login costs the same
    whether or not the account exists.
    """
    await asyncio.to_thread(_burn, password, rounds)
