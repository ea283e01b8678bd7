"""Session issuance and lookup.

Session keys are random bearer tokens. The store keeps only their SHA-256
hash, the same way refresh tokens are never stored raw.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from notevault.models.user import User
from notevault.services.credential_store import CredentialStore
from notevault.services.errors import UnauthenticatedError
from notevault.utils.crypto import generate_session_key, sha256_hash


@dataclass(frozen=True, slots=True)
class IssuedSession:
    """A freshly created session. ``key`` is the only copy of the raw token."""

    key: str
    user_id: int
    expires_at: datetime

    @property
    def expires_at_unix(self) -> int:
        return int(self.expires_at.timestamp())


def hash_session_key(key: str) -> str:
    return sha256_hash(key.encode("utf-8"))


class SessionIssuer:
    """Creates sessions with a fixed lifetime."""

    __slots__ = ("_lifetime",)

    def __init__(self, lifetime: timedelta) -> None:
        if lifetime <= timedelta(0):
            raise ValueError(f"session lifetime must be positive, got {lifetime}")
        self._lifetime = lifetime

    @property
    def lifetime(self) -> timedelta:
        return self._lifetime

    def issue(
        self, store: CredentialStore, user_id: int, now: datetime | None = None
    ) -> IssuedSession:
        """Persist a new session for the user and return its raw key.

        Storage failures propagate as StorageError; nothing is returned to
        the caller in that case, so no half-created session is usable.
        """
        now = now or datetime.now(timezone.utc)
        key = generate_session_key()
        expires_at = now + self._lifetime
        store.create_session(user_id, hash_session_key(key), expires_at)
        return IssuedSession(key=key, user_id=user_id, expires_at=expires_at)


def resolve_session_user(
    store: CredentialStore, key: str | None, now: datetime | None = None
) -> User:
    """Return the user owning an unexpired session key.

    Raises UnauthenticatedError when the key is missing, unknown, expired,
    or its user no longer exists.
    """
    if not key:
        raise UnauthenticatedError("no session key")
    now = now or datetime.now(timezone.utc)
    session = store.find_active_session(hash_session_key(key), now)
    if session is None:
        raise UnauthenticatedError("session not found or expired")
    user = store.get_user(session.user_id)
    if user is None:
        raise UnauthenticatedError("session user not found")
    return user
