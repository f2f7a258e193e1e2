from __future__ import annotations

import hashlib
import hmac
from typing import Optional


def hash_password(password: str) -> str:
    """SHA-256 hex digest; clients send this instead of the password itself."""
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


class AccessGate:
    def __init__(self, password_hash: Optional[str] = None):
        self.password_hash = password_hash

    @classmethod
    def from_password(cls, password: Optional[str]) -> "AccessGate":
        return cls(hash_password(password) if password is not None else None)

    @property
    def requires_password(self) -> bool:
        return self.password_hash is not None

    def allows(self, provided_hash: Optional[str]) -> bool:
        if self.password_hash is None:
            return True
        if provided_hash is None:
            return False
        return hmac.compare_digest(self.password_hash, provided_hash)
