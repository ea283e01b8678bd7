"""Demotion of classic accounts to legacy password authentication."""

from __future__ import annotations

import logging

from notevault.models.user import User
from notevault.services.credential_store import CredentialStore

logger = logging.getLogger(__name__)


def migrate_to_legacy(store: CredentialStore, user: User) -> None:
    """Strip the classic-mode credentials from the user's account.

    Clears salt, auth key hash, cipher key blob and both KDF iteration
    counts in a single update. There is no way back to classic mode; the
    account authenticates with its legacy password from now on.

    The caller must already have authenticated ``user``. No current key or
    password is re-checked here.
    """
    account = store.find_account_by_user(user.id)
    was_legacy = account.legacy
    store.clear_classic_fields(user.id)
    if was_legacy:
        logger.info("Migrate called on already-legacy account for user_id=%s", user.id)
    else:
        logger.info("Migrated account to legacy mode for user_id=%s", user.id)
