"""Low-level cryptographic primitives for notevault.

Pure functions with no domain knowledge, reused by the services.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import secrets

import bcrypt
from cryptography.hazmat.primitives.hashes import SHA256
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

AUTH_KEY_HASH_LENGTH = 32
SESSION_KEY_BYTES = 32


def hash_auth_key(auth_key: str, salt: str, iteration: int) -> str:
    """Hash a client-derived auth key with PBKDF2-HMAC-SHA256.

    Returns the 32-byte digest as standard base64. The same construction
    is used when an account is enrolled and when a sign-in is verified.
    """
    kdf = PBKDF2HMAC(
        algorithm=SHA256(),
        length=AUTH_KEY_HASH_LENGTH,
        salt=salt.encode("utf-8"),
        iterations=iteration,
    )
    digest = kdf.derive(auth_key.encode("utf-8"))
    return base64.b64encode(digest).decode("ascii")


def constant_time_equals(a: str, b: str) -> bool:
    """Compare two strings without leaking the mismatch position through timing."""
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def hash_password(password: str, cost: int) -> str:
    """Bcrypt-hash a plaintext password with a fresh salt.

    Raises ValueError for inputs bcrypt refuses (e.g. longer than 72 bytes
    on current bcrypt releases).
    """
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=cost))
    return hashed.decode("ascii")


def check_password(password: str, hashed: str) -> bool:
    """Check a plaintext password against a bcrypt hash.

    An empty or malformed stored hash never matches.
    """
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("ascii"))
    except ValueError:
        return False


def generate_session_key() -> str:
    """Generate an unpredictable, URL-safe session key."""
    return secrets.token_urlsafe(SESSION_KEY_BYTES)


def sha256_hash(data: bytes) -> str:
    """Compute SHA-256 hash. Returns hex-encoded digest."""
    return hashlib.sha256(data).hexdigest()
