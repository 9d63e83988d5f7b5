"""
API request and response models for Teamboard REST endpoints.

These Pydantic v2 models define the HTTP transport contract. They are
intentionally separate from the dataclasses in auth/models.py and
posts/models.py, which own the internal domain representation. Route handlers
map between the two.

Response models never include a team's secret hash.
"""

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

from auth.models import Team
from posts.models import Post

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MIN_PLAYERS = 13

# bcrypt ignores everything past 72 bytes of input.
_MAX_SECRET_BYTES = 72

_TeamName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
_City = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class TeamCreate(BaseModel):
    """Request body for POST /api/team.

    secret is the team's credential. It is kept apart from players, which is
    ordinary team data, and is not whitespace-stripped.
    """

    name: _TeamName
    city: _City
    players: int = Field(ge=MIN_PLAYERS, le=1000)
    secret: str = Field(min_length=6)

    @field_validator("secret")
    @classmethod
    def secret_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > _MAX_SECRET_BYTES:
            raise ValueError(f"secret must be at most {_MAX_SECRET_BYTES} bytes")
        return value


class LoginRequest(BaseModel):
    """Request body for POST /api/login."""

    name: _TeamName
    secret: str = Field(min_length=1, max_length=255)


class PostCreate(BaseModel):
    """Request body for POST /api/posts."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=200)
    body: str = Field(min_length=1, max_length=10_000)


class PostUpdate(BaseModel):
    """Request body for PUT /api/posts/{post_id}.

    Absent or empty fields keep their current value.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, max_length=200)
    body: Optional[str] = Field(default=None, max_length=10_000)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class TokenResponse(BaseModel):
    token: str


class TeamResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    city: str
    players: int
    date: str

    @classmethod
    def from_team(cls, team: Team) -> "TeamResponse":
        return cls(id=team.id, name=team.name, city=team.city, players=team.players, date=team.date)


class PostResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    team: str
    title: str
    body: str
    date: str

    @classmethod
    def from_post(cls, post: Post) -> "PostResponse":
        return cls(id=post.id, team=post.team, title=post.title, body=post.body, date=post.date)


class MessageResponse(BaseModel):
    """Single-message body, used for auth failures and simple confirmations."""

    msg: str


class ErrorItem(BaseModel):
    msg: str
    param: Optional[str] = None
    location: Optional[str] = None


class ErrorList(BaseModel):
    """List-form error body returned for validation failures."""

    errors: list[ErrorItem]


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
