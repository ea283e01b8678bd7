"""Legacy sign-in endpoint and session cookie helpers shared with the classic router."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from notevault.config import get_settings
from notevault.dependencies import get_session_issuer, get_store
from notevault.models.auth import SigninRequest, SigninResponse
from notevault.services.credential_store import CredentialStore
from notevault.services.errors import AuthenticationFailure, StorageError
from notevault.services.passwords import verify_legacy_password
from notevault.services.sessions import IssuedSession, SessionIssuer

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["auth"])

# Single message for every credential failure, whatever the cause
LOGIN_FAILURE_DETAIL = "Wrong email and password combination"
INTERNAL_ERROR_DETAIL = "Internal server error"


def set_session_cookie(response: Response, session: IssuedSession) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session.key,
        expires=session.expires_at,
        path="/",
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


def start_session(
    response: Response,
    store: CredentialStore,
    issuer: SessionIssuer,
    user_id: int,
) -> IssuedSession:
    """Issue a session for an authenticated user and attach its cookie."""
    try:
        session = issuer.issue(store, user_id)
    except StorageError:
        logger.exception("Failed to create session for user_id=%s", user_id)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR_DETAIL)
    set_session_cookie(response, session)
    return session


@router.post("/signin", response_model=SigninResponse)
def signin(
    body: SigninRequest,
    response: Response,
    store: CredentialStore = Depends(get_store),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> SigninResponse:
    """Sign in with email and a plaintext password (legacy accounts)."""
    try:
        account = verify_legacy_password(
            store, body.email, body.password, get_settings().password_hash_cost
        )
    except AuthenticationFailure:
        raise HTTPException(status_code=401, detail=LOGIN_FAILURE_DETAIL)
    except StorageError:
        logger.exception("Failed to look up account for sign in")
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR_DETAIL)

    session = start_session(response, store, issuer, account.user_id)
    return SigninResponse(key=session.key, expires_at=session.expires_at_unix)
