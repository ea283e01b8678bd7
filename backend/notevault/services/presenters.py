"""Client-facing views of accounts and notes."""

from __future__ import annotations

from collections.abc import Iterable

from notevault.models.auth import AccountState
from notevault.models.note import Note, NoteRead
from notevault.models.user import Account, User


def present_account_state(user: User, account: Account) -> AccountState:
    """Combine a user and their account into the ``/me`` payload.

    ``legacy`` is derived from the auth key hash; ``encrypted`` belongs to
    the user and is unrelated to the account mode.
    """
    return AccountState(
        id=user.id,
        github_name=account.nickname,
        github_account_id=account.account_id,
        api_key=user.api_key,
        name=user.name,
        email=account.email or "",
        email_verified=account.email_verified,
        provider=account.provider,
        cloud=user.cloud,
        legacy=account.legacy,
        encrypted=user.encrypted,
        cipher_key_enc=account.cipher_key_enc,
    )


def present_notes(notes: Iterable[Note]) -> list[NoteRead]:
    return [
        NoteRead(
            uuid=note.uuid,
            content=note.body,
            added_on=note.added_on,
            edited_on=note.edited_on,
            usn=note.usn,
            public=note.public,
            created_at=note.created_at,
            updated_at=note.updated_at,
        )
        for note in notes
    ]
