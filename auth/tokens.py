"""
auth/tokens.py -- Signed, time-limited identity tokens.

JWT via python-jose with HS256. A token carries {"team": {"id": ...}} plus
iat/exp claims. Validity is signature + expiry only: there is no revocation
list, so a leaked token stays usable until it expires or SECRET_KEY is rotated
(which invalidates every outstanding token).

TokenService is built once in the app lifespan from the Settings object and
shared through app.state. It holds the signing key; nothing else does.

Layer rule: no imports from api/ or posts/.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from auth.models import Identity
from core.config import Settings

logger = logging.getLogger("teamboard.auth")

_ALGORITHM = "HS256"


class TokenError(Exception):
    """Base class for token verification failures."""

    reason = "invalid"


class InvalidSignature(TokenError):
    """Signature does not match the configured key, or the token is not a JWT."""

    reason = "invalid_signature"


class Expired(TokenError):
    reason = "expired"


class MalformedToken(TokenError):
    """Correctly signed, but the payload carries no team identity."""

    reason = "malformed"


class TokenService:
    """Issues and verifies identity tokens.

    Usage:
        tokens = TokenService(get_settings())
        token = tokens.issue(Identity(id=team_id))
        identity = tokens.verify(token)
    """

    def __init__(self, settings: Settings) -> None:
        self._secret_key = settings.secret_key
        self.ttl_seconds = settings.token_expire_seconds

    def issue(self, identity: Identity, ttl_seconds: int | None = None) -> str:
        """Return a signed token for identity expiring ttl_seconds from now.

        ttl_seconds defaults to the configured TOKEN_EXPIRE_SECONDS.
        """
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        now = datetime.now(timezone.utc)
        payload = {
            "team": {"id": identity.id},
            "iat": now,
            "exp": now + timedelta(seconds=ttl),
        }
        return jwt.encode(payload, self._secret_key, algorithm=_ALGORITHM)

    def verify(self, token: str) -> Identity:
        """Return the identity embedded in token.

        Raises Expired, InvalidSignature or MalformedToken.
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[_ALGORITHM])
        except ExpiredSignatureError as exc:
            raise Expired("Token has expired") from exc
        except JWTError as exc:
            raise InvalidSignature(str(exc)) from exc

        team = payload.get("team")
        if not isinstance(team, dict) or not isinstance(team.get("id"), str) or not team["id"]:
            raise MalformedToken("Token payload carries no team identity")
        return Identity(id=team["id"])
