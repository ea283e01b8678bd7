"""Login sessions issued after a successful sign-in."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlmodel import Field, SQLModel


class UserSession(SQLModel, table=True):
    """A bearer session.

    Only the SHA-256 hash of the session key is persisted. The raw key is
    handed to the client once, in the sign-in response.
    """

    __tablename__ = "sessions"

    id: int | None = Field(default=None, primary_key=True)
    key_hash: str = Field(unique=True, index=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    expires_at: datetime
