"""Notes owned by a user. Content is opaque ciphertext for encrypted notes."""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from pydantic import BaseModel
from sqlmodel import Field, SQLModel


class Note(SQLModel, table=True):
    __tablename__ = "notes"

    id: int | None = Field(default=None, primary_key=True)
    uuid: str = Field(default_factory=lambda: str(uuid4()), unique=True, index=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    body: str = Field(default="")
    added_on: int = Field(default=0)  # unix nanoseconds, set by the client
    edited_on: int = Field(default=0)
    usn: int = Field(default=0)
    public: bool = Field(default=False)
    encrypted: bool = Field(default=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class NoteRead(BaseModel):
    uuid: str
    content: str
    added_on: int
    edited_on: int
    usn: int
    public: bool
    created_at: datetime
    updated_at: datetime
