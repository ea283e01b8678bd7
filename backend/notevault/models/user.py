"""User and account models.

A user owns exactly one account. The account carries the credentials for
both authentication generations:

- classic: the client derives an auth key locally and the server stores a
  salted PBKDF2 hash of it (``auth_key_hash``) plus the client-encrypted
  cipher key blob.
- legacy: a bcrypt hash of a conventional password (``password``).

The mode is never stored; an account is legacy when ``auth_key_hash`` is
empty.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlmodel import Field, SQLModel


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(default="")
    api_key: str | None = Field(default=None)
    cloud: bool = Field(default=False)
    # Whether the user's notes are end-to-end encrypted; independent of account mode
    encrypted: bool = Field(default=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Account(SQLModel, table=True):
    __tablename__ = "accounts"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", unique=True, index=True)
    # NULL for provider-only accounts
    email: str | None = Field(default=None, unique=True, index=True)
    email_verified: bool = Field(default=False)
    provider: str = Field(default="")
    nickname: str = Field(default="")
    account_id: str = Field(default="")

    salt: str = Field(default="")
    auth_key_hash: str = Field(default="")
    cipher_key_enc: str = Field(default="")
    client_kdf_iteration: int = Field(default=0)
    server_kdf_iteration: int = Field(default=0)

    password: str = Field(default="")  # bcrypt hash, legacy mode only

    @property
    def legacy(self) -> bool:
        return self.auth_key_hash == ""
