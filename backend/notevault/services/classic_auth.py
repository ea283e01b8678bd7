"""Classic (client-derived key) sign-in.

The client fetches its KDF iteration count with ``resolve_presign_iteration``,
derives an auth key locally, and submits it to ``verify_auth_key``. The
server only ever sees the derived key and compares a salted PBKDF2 hash of
it with the stored ``auth_key_hash``.
"""

from __future__ import annotations

import logging

from notevault.models.user import Account
from notevault.services.credential_store import CredentialStore
from notevault.services.errors import AuthenticationFailure, ValidationError
from notevault.utils.crypto import constant_time_equals, hash_auth_key

logger = logging.getLogger(__name__)

DEFAULT_DUMMY_ITERATION = 100000
_DUMMY_SALT = "notevault-dummy-salt"


def resolve_presign_iteration(
    store: CredentialStore, email: str, default_iteration: int
) -> int:
    """Return the client KDF iteration count for an email.

    Unknown emails get ``default_iteration`` so the response has the same
    shape whether or not the account exists.
    """
    if not email:
        raise ValidationError("email is required")

    account = store.find_account_by_email(email)
    if account is None:
        return default_iteration
    return account.client_kdf_iteration


def verify_auth_key(
    store: CredentialStore,
    email: str,
    auth_key: str,
    dummy_iteration: int = DEFAULT_DUMMY_ITERATION,
) -> Account:
    """Verify a client-derived auth key and return the matching account.

    Missing fields, unknown emails, legacy-mode accounts and wrong keys all
    raise the same AuthenticationFailure. When there is no auth key hash to
    check against, the key is still hashed with ``dummy_iteration`` rounds
    so response time does not reveal whether the account exists. Does not
    modify the store.
    """
    if not email or not auth_key:
        raise AuthenticationFailure("missing email or auth key")

    account = store.find_account_by_email(email)
    if account is None:
        hash_auth_key(auth_key, _DUMMY_SALT, dummy_iteration)
        logger.warning("Classic sign in for unknown email %s", email)
        raise AuthenticationFailure("account not found")

    if account.legacy:
        hash_auth_key(auth_key, _DUMMY_SALT, dummy_iteration)
        logger.warning(
            "Classic sign in against legacy account_id=%s", account.id
        )
        raise AuthenticationFailure("account has no auth key")

    computed = hash_auth_key(auth_key, account.salt, account.server_kdf_iteration)
    if not constant_time_equals(computed, account.auth_key_hash):
        logger.warning("Sign in password mismatch account_id=%s", account.id)
        raise AuthenticationFailure("auth key mismatch")

    return account
