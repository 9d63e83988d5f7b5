"""
auth/hashing.py -- One-way salted hashing for team secrets.

bcrypt is used directly (no passlib wrapper). Each hash gets a fresh salt from
bcrypt.gensalt(); the salt and cost factor are embedded in the returned
string, so verification needs nothing but the stored value.

bcrypt is deliberately slow. Callers are synchronous route handlers, which
FastAPI runs in its thread pool, so the event loop never waits on a hash.

bcrypt only considers the first 72 bytes of input. The API layer rejects longer
secrets (api/models.py) instead of letting them be silently truncated.
"""

from __future__ import annotations

import bcrypt


def hash_secret(secret: str, rounds: int = 10) -> str:
    """Return a bcrypt hash of secret using a fresh salt at the given cost."""
    if not secret:
        raise ValueError("secret must not be empty")
    return bcrypt.hashpw(secret.encode("utf-8"), bcrypt.gensalt(rounds)).decode("utf-8")


def verify_secret(secret: str, hashed: str) -> bool:
    """Return True if secret matches hashed. Never raises."""
    try:
        return bcrypt.checkpw(secret.encode("utf-8"), hashed.encode("utf-8"))
    except (TypeError, ValueError):
        return False
