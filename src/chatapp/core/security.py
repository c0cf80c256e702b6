"""Password hashing built on passlib's bcrypt scheme."""
from __future__ import annotations

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Return a salted bcrypt hash of ``password``."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True if ``plain_password`` matches the stored hash."""
    return pwd_context.verify(plain_password, hashed_password)


def dummy_verify() -> None:
    """Burn the same time as a real verification.

    Used when a login names an unknown account so that response timing does
    not reveal whether the username or email exists.
    """
    pwd_context.dummy_verify()
