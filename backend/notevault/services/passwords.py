"""Legacy password scheme: rotation and verification."""

from __future__ import annotations

import logging
from functools import lru_cache

from notevault.models.user import Account, User
from notevault.services.credential_store import CredentialStore
from notevault.services.errors import (
    AuthenticationFailure,
    PasswordHashError,
    ValidationError,
)
from notevault.utils.crypto import check_password, hash_password

logger = logging.getLogger(__name__)

# bcrypt only reads this many bytes of input
MAX_PASSWORD_BYTES = 72
DEFAULT_PASSWORD_HASH_COST = 10


@lru_cache
def _dummy_password_hash(cost: int) -> str:
    """Hash checked against when there is no usable account, to keep timing flat."""
    return hash_password("notevault-dummy-password", cost)


def rotate_password(
    store: CredentialStore, user: User, password: str, cost: int
) -> None:
    """Set or replace the user's legacy password hash.

    Classic-mode fields are left alone, so the new password only takes
    effect once the account is legacy. Password policy is the caller's
    concern; an empty password is hashed like any other. Passwords longer
    than bcrypt's input limit raise ValidationError.
    """
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(
            f"password must be at most {MAX_PASSWORD_BYTES} bytes"
        )

    try:
        hashed = hash_password(password, cost)
    except ValueError as exc:
        raise PasswordHashError("hashing password") from exc

    store.set_password_hash(user.id, hashed)
    logger.info("Updated legacy password for user_id=%s", user.id)


def verify_legacy_password(
    store: CredentialStore,
    email: str,
    password: str,
    cost: int = DEFAULT_PASSWORD_HASH_COST,
) -> Account:
    """Verify a plaintext password against a legacy account.

    The legacy password only counts once the account has left classic
    mode. An empty password is checked like any other, since rotation may
    have stored one. Every failure raises the same AuthenticationFailure,
    and unknown or classic accounts still pay for one bcrypt check.
    """
    if not email:
        raise AuthenticationFailure("missing email")

    account = store.find_account_by_email(email)
    if account is None:
        check_password(password, _dummy_password_hash(cost))
        logger.warning("Sign in for unknown email %s", email)
        raise AuthenticationFailure("account not found")

    if not account.legacy:
        check_password(password, _dummy_password_hash(cost))
        logger.warning("Password sign in against classic account_id=%s", account.id)
        raise AuthenticationFailure("account is in classic mode")

    if not check_password(password, account.password):
        logger.warning("Sign in password mismatch account_id=%s", account.id)
        raise AuthenticationFailure("password mismatch")

    return account
