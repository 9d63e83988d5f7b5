"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Stores and routes do
the work.

Layer rule: no imports from api/ or posts/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """Who a request acts as. Embedded in every issued token.

    id is the team's opaque record id. The record itself may be gone by the
    time a token is presented; handlers that need the team look it up.
    """

    id: str


@dataclass
class Team:
    """A registered team.

    secret_hash is the bcrypt hash of the team's secret; the plaintext is
    never stored. players is plain data, not a credential.

    id is None before the record is written to the database.
    """

    name: str
    city: str
    players: int
    secret_hash: str
    id: str | None = None
    date: str = ""  # ISO 8601, set by store on insert
