"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

Token sources, checked in priority order:
  1. x-auth-token header -- the convention existing clients use.
  2. Authorization: Bearer <token> header.

get_current_identity() is the gate for every protected route. It either
returns the verified Identity (and leaves it on request.state.identity) or
raises Unauthenticated, in which case the route handler never runs. The gate
does no store lookups: a valid signature and an unexpired token are enough.

Layer rule: no imports from api/ or posts/.
"""

from __future__ import annotations

import logging

from fastapi import Request

from auth.models import Identity
from auth.tokens import TokenError, TokenService
from core.errors import Unauthenticated

logger = logging.getLogger("teamboard.auth")


def extract_token(request: Request) -> str | None:
    """Return the raw token from the request headers, or None if absent."""
    token = request.headers.get("x-auth-token", "").strip()
    if token:
        return token

    auth_header = request.headers.get("Authorization", "")
    scheme, _, credentials = auth_header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


def get_current_identity(request: Request) -> Identity:
    """Require a valid token. Raises Unauthenticated (401) otherwise.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(identity: Identity = Depends(get_current_identity)): ...
    """
    token = extract_token(request)
    if token is None:
        logger.info("Rejected %s %s: no token", request.method, request.url.path)
        raise Unauthenticated("No token, authorization denied", reason="missing")

    tokens: TokenService = request.app.state.tokens
    try:
        identity = tokens.verify(token)
    except TokenError as exc:
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.reason)
        raise Unauthenticated("Token is not valid", reason=exc.reason) from exc

    request.state.identity = identity
    return identity
