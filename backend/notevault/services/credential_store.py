"""Repository for account credentials and login sessions.

Every mutation is a single UPDATE/INSERT/DELETE statement committed on its
own, so a concurrent reader sees either the old row or the new one, never a
partially cleared account.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from notevault.models.note import Note
from notevault.models.session import UserSession
from notevault.models.user import Account, User
from notevault.services.errors import StorageError

logger = logging.getLogger(__name__)

# Column values of an account that holds no classic-mode credentials
CLEARED_CLASSIC_FIELDS: dict[str, str | int] = {
    "salt": "",
    "auth_key_hash": "",
    "cipher_key_enc": "",
    "client_kdf_iteration": 0,
    "server_kdf_iteration": 0,
}


class CredentialStore:
    """Per-request handle over the account, session and user tables."""

    def __init__(self, db: Session) -> None:
        self._db = db

    # --- reads ---

    def find_account_by_email(self, email: str) -> Account | None:
        try:
            return self._db.exec(select(Account).where(Account.email == email)).first()
        except SQLAlchemyError as exc:
            raise StorageError("finding account by email") from exc

    def find_account_by_user(self, user_id: int) -> Account:
        """Return the account owned by a user.

        A user without an account is an inconsistent store and raises
        StorageError.
        """
        try:
            account = self._db.exec(
                select(Account).where(Account.user_id == user_id)
            ).first()
        except SQLAlchemyError as exc:
            raise StorageError("finding account by user") from exc
        if account is None:
            raise StorageError(f"no account for user {user_id}")
        return account

    def get_user(self, user_id: int) -> User | None:
        try:
            return self._db.get(User, user_id)
        except SQLAlchemyError as exc:
            raise StorageError("getting user") from exc

    def find_active_session(self, key_hash: str, now: datetime) -> UserSession | None:
        try:
            return self._db.exec(
                select(UserSession).where(
                    UserSession.key_hash == key_hash,
                    UserSession.expires_at > now,
                )
            ).first()
        except SQLAlchemyError as exc:
            raise StorageError("finding session") from exc

    def list_encrypted_notes(self, user_id: int) -> Sequence[Note]:
        try:
            return self._db.exec(
                select(Note)
                .where(Note.user_id == user_id, Note.encrypted == True)  # noqa: E712
                .order_by(Note.added_on)
            ).all()
        except SQLAlchemyError as exc:
            raise StorageError("finding notes") from exc

    # --- writes ---

    def clear_classic_fields(self, user_id: int) -> None:
        """Reset every classic-mode column of the user's account in one statement."""
        self._update_account(user_id, CLEARED_CLASSIC_FIELDS, "clearing classic fields")

    def set_password_hash(self, user_id: int, password_hash: str) -> None:
        self._update_account(user_id, {"password": password_hash}, "updating password")

    def create_session(
        self, user_id: int, key_hash: str, expires_at: datetime
    ) -> UserSession:
        session = UserSession(key_hash=key_hash, user_id=user_id, expires_at=expires_at)
        try:
            self._db.add(session)
            self._db.commit()
            self._db.refresh(session)
        except SQLAlchemyError as exc:
            self._db.rollback()
            raise StorageError("creating session") from exc
        return session

    def delete_expired_sessions(self, now: datetime) -> int:
        """Delete sessions past their expiry. Returns the number removed."""
        try:
            result = self._db.execute(
                delete(UserSession)
                .where(UserSession.expires_at <= now)
                .execution_options(synchronize_session=False)
            )
            self._db.commit()
        except SQLAlchemyError as exc:
            self._db.rollback()
            raise StorageError("deleting expired sessions") from exc
        return result.rowcount

    def _update_account(self, user_id: int, values: dict, action: str) -> None:
        try:
            result = self._db.execute(
                update(Account)
                .where(Account.user_id == user_id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            self._db.commit()
        except SQLAlchemyError as exc:
            self._db.rollback()
            raise StorageError(action) from exc
        if result.rowcount == 0:
            raise StorageError(f"{action}: no account for user {user_id}")
