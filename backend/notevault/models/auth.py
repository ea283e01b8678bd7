"""Pydantic request/response schemas for the sign-in and account endpoints."""

from __future__ import annotations

from pydantic import BaseModel


class PresigninResponse(BaseModel):
    """Iteration count the client should use to derive its auth key."""

    iteration: int


class ClassicSigninRequest(BaseModel):
    email: str = ""
    auth_key: str = ""  # client-derived key, never the raw password


class ClassicSigninResponse(BaseModel):
    key: str
    expires_at: int  # unix seconds
    cipher_key_enc: str


class SigninRequest(BaseModel):
    email: str = ""
    password: str = ""


class SigninResponse(BaseModel):
    key: str
    expires_at: int


class SetPasswordRequest(BaseModel):
    password: str = ""


class AccountState(BaseModel):
    id: int
    github_name: str
    github_account_id: str
    api_key: str | None
    name: str
    email: str
    email_verified: bool
    provider: str
    cloud: bool
    legacy: bool
    encrypted: bool
    cipher_key_enc: str


class AccountStateResponse(BaseModel):
    user: AccountState
