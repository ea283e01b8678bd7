"""Classic-mode endpoints: presignin, signin, account state, migration, password.

Classic accounts authenticate with a key derived on the client; the server
stores a PBKDF2 hash of it and releases the encrypted cipher key blob on
success. Migration strips those fields and leaves the account on the
legacy password scheme.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from notevault.config import get_settings
from notevault.dependencies import get_current_user, get_session_issuer, get_store
from notevault.models.auth import (
    AccountStateResponse,
    ClassicSigninRequest,
    ClassicSigninResponse,
    PresigninResponse,
    SetPasswordRequest,
)
from notevault.models.note import NoteRead
from notevault.models.user import User
from notevault.routers.auth import (
    INTERNAL_ERROR_DETAIL,
    LOGIN_FAILURE_DETAIL,
    start_session,
)
from notevault.services.classic_auth import resolve_presign_iteration, verify_auth_key
from notevault.services.credential_store import CredentialStore
from notevault.services.errors import (
    AuthenticationFailure,
    PasswordHashError,
    StorageError,
    ValidationError,
)
from notevault.services.migration import migrate_to_legacy
from notevault.services.passwords import rotate_password
from notevault.services.presenters import present_account_state, present_notes
from notevault.services.sessions import SessionIssuer

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/classic", tags=["classic"])


@router.get("/presignin", response_model=PresigninResponse)
async def presignin(
    email: str = Query(""),
    store: CredentialStore = Depends(get_store),
) -> PresigninResponse:
    """Return the KDF iteration count the client should derive its key with."""
    try:
        iteration = resolve_presign_iteration(
            store, email, get_settings().default_kdf_iteration
        )
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except StorageError:
        logger.exception("Failed to look up account for presignin")
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR_DETAIL)
    return PresigninResponse(iteration=iteration)


@router.post("/signin", response_model=ClassicSigninResponse)
def signin(
    body: ClassicSigninRequest,
    response: Response,
    store: CredentialStore = Depends(get_store),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> ClassicSigninResponse:
    """Verify a client-derived auth key and issue a session."""
    try:
        account = verify_auth_key(
            store,
            body.email,
            body.auth_key,
            dummy_iteration=get_settings().default_kdf_iteration,
        )
    except AuthenticationFailure:
        raise HTTPException(status_code=401, detail=LOGIN_FAILURE_DETAIL)
    except StorageError:
        logger.exception("Failed to look up account for classic sign in")
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR_DETAIL)

    session = start_session(response, store, issuer, account.user_id)
    return ClassicSigninResponse(
        key=session.key,
        expires_at=session.expires_at_unix,
        cipher_key_enc=account.cipher_key_enc,
    )


@router.get("/me", response_model=AccountStateResponse)
async def get_me(
    user: User = Depends(get_current_user),
    store: CredentialStore = Depends(get_store),
) -> AccountStateResponse:
    try:
        account = store.find_account_by_user(user.id)
    except StorageError:
        logger.exception("Failed to find account for user_id=%s", user.id)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR_DETAIL)
    return AccountStateResponse(user=present_account_state(user, account))


@router.patch("/migrate")
async def migrate(
    user: User = Depends(get_current_user),
    store: CredentialStore = Depends(get_store),
) -> Response:
    """Irreversibly move the caller's account off the classic scheme."""
    try:
        migrate_to_legacy(store, user)
    except StorageError:
        logger.exception("Failed to migrate account for user_id=%s", user.id)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR_DETAIL)
    return Response(status_code=200)


@router.patch("/set-password")
def set_password(
    body: SetPasswordRequest,
    user: User = Depends(get_current_user),
    store: CredentialStore = Depends(get_store),
) -> Response:
    """Set or replace the caller's legacy password."""
    try:
        rotate_password(store, user, body.password, get_settings().password_hash_cost)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except (PasswordHashError, StorageError):
        logger.exception("Failed to set password for user_id=%s", user.id)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR_DETAIL)
    return Response(status_code=200)


@router.get("/notes", response_model=list[NoteRead])
async def get_notes(
    user: User = Depends(get_current_user),
    store: CredentialStore = Depends(get_store),
) -> list[NoteRead]:
    """List the caller's encrypted notes."""
    try:
        notes = store.list_encrypted_notes(user.id)
    except StorageError:
        logger.exception("Failed to find notes for user_id=%s", user.id)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR_DETAIL)
    return present_notes(notes)
