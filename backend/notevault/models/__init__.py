from __future__ import annotations

from notevault.models.user import Account, User  # noqa: F401
from notevault.models.session import UserSession  # noqa: F401
from notevault.models.note import Note  # noqa: F401
