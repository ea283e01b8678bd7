"""FastAPI dependency injection for the credential store and the calling user."""

from __future__ import annotations

import logging
from datetime import timedelta

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from notevault.config import get_settings
from notevault.db import get_session
from notevault.models.user import User
from notevault.services.credential_store import CredentialStore
from notevault.services.errors import StorageError, UnauthenticatedError
from notevault.services.sessions import SessionIssuer, resolve_session_user

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


def get_store(db: Session = Depends(get_session)) -> CredentialStore:
    return CredentialStore(db)


def get_session_issuer() -> SessionIssuer:
    settings = get_settings()
    return SessionIssuer(timedelta(days=settings.session_lifetime_days))


def get_session_key(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> str | None:
    """Read the session key from the Authorization header, falling back to the cookie."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(get_settings().session_cookie_name)


def get_current_user(
    key: str | None = Depends(get_session_key),
    store: CredentialStore = Depends(get_store),
) -> User:
    """Resolve the authenticated user for the request.

    Raises HTTPException 401 if there is no valid, unexpired session.
    """
    try:
        return resolve_session_user(store, key)
    except UnauthenticatedError:
        raise HTTPException(status_code=401, detail="No authenticated user found")
    except StorageError:
        logger.exception("Failed to resolve session")
        raise HTTPException(status_code=500, detail="Internal server error")
