"""
api/routes/teams.py -- Team registration, login and identity endpoints.

Routes:
  POST /api/team   -- register a team; returns a token
  POST /api/login  -- exchange name + secret for a token
  GET  /api/auth   -- the team behind the presented token (requires auth)

Registration and login are plain `def` handlers: bcrypt is slow on purpose,
and FastAPI runs sync handlers in its thread pool, off the event loop.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.exc import IntegrityError

from api.models import LoginRequest, TeamCreate, TeamResponse, TokenResponse
from auth.dependencies import get_current_identity
from auth.hashing import hash_secret, verify_secret
from auth.models import Identity, Team
from auth.store import TeamStore
from auth.tokens import TokenService
from core.errors import Conflict, InvalidCredentials, NotFound

# Auth policy:
# - POST /api/team:   public -- registration issues the first token
# - POST /api/login:  public
# - GET  /api/auth:   requires auth (get_current_identity)
router = APIRouter()

_DUPLICATE_NAME = "Team name is already registered"


@router.post("/team", response_model=TokenResponse)
def register_team(request: Request, body: TeamCreate) -> TokenResponse:
    """Register a new team and return a token for it.

    The name check up front gives the common case a clean answer; the UNIQUE
    constraint settles the race where two requests pass the check together.
    """
    teams: TeamStore = request.app.state.teams
    tokens: TokenService = request.app.state.tokens

    if teams.find_by_name(body.name) is not None:
        raise Conflict(_DUPLICATE_NAME)

    team = Team(
        name=body.name,
        city=body.city,
        players=body.players,
        secret_hash=hash_secret(body.secret, request.app.state.settings.bcrypt_rounds),
    )
    try:
        team_id = teams.create(team)
    except IntegrityError as exc:
        raise Conflict(_DUPLICATE_NAME) from exc

    return TokenResponse(token=tokens.issue(Identity(id=team_id)))


@router.post("/login", response_model=TokenResponse)
def login(request: Request, body: LoginRequest) -> TokenResponse:
    """Authenticate with team name and secret; return a token."""
    teams: TeamStore = request.app.state.teams
    tokens: TokenService = request.app.state.tokens

    team = teams.find_by_name(body.name)
    if team is None:
        raise InvalidCredentials("Invalid team name")
    if not verify_secret(body.secret, team.secret_hash):
        raise InvalidCredentials("Invalid secret")

    return TokenResponse(token=tokens.issue(Identity(id=team.id)))


@router.get("/auth", response_model=TeamResponse)
def current_team(request: Request, identity: Identity = Depends(get_current_identity)) -> TeamResponse:
    """Return the team the token was issued to."""
    teams: TeamStore = request.app.state.teams
    team = teams.find_by_id(identity.id)
    if team is None:
        raise NotFound("Team not found")
    return TeamResponse.from_team(team)
