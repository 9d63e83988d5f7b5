"""
auth/store.py -- SQLAlchemy Core persistence layer for teams.

Pattern: Repository + Data Mapper (same as posts/store.py).
TeamStore is the repository; _row_to_team is the mapper.
Route and dependency code never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.

  UNIQUE(name) is enforced by the database. Two concurrent registrations with
  the same name cannot both succeed: the loser gets IntegrityError, which the
  registration route reports as a conflict.

Layer rule: no imports from api/ or posts/.
"""

from __future__ import annotations

from sqlalchemy import Column, Integer, MetaData, String, Table, Text
from sqlalchemy.engine import Engine

from auth.models import Team
from core.config import get_settings
from core.db import make_engine, new_record_id, now_iso

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_teams = Table(
    "teams",
    _metadata,
    Column("id", String(32), primary_key=True),  # uuid4 hex
    Column("name", String(255), nullable=False, unique=True),
    Column("city", String(255), nullable=False),
    Column("players", Integer, nullable=False),
    Column("secret_hash", Text, nullable=False),
    Column("date", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class TeamStore:
    """Repository for Team records.

    Usage:
        store = TeamStore()
        team_id = store.create(Team(name="Reds", city="Leeds", players=13, secret_hash=hash_secret("...")))
        team = store.find_by_name("Reds")
        store.close()
    """

    def __init__(self, db_url: str | None = None) -> None:
        self.engine: Engine = make_engine(db_url or get_settings().database_url)
        _metadata.create_all(self.engine)

    def create(self, team: Team) -> str:
        """Insert a new team and return its assigned id.

        Raises sqlalchemy.exc.IntegrityError if the name is already taken.
        """
        team_id = new_record_id()
        with self.engine.connect() as conn:
            conn.execute(
                _teams.insert().values(
                    id=team_id,
                    name=team.name,
                    city=team.city,
                    players=team.players,
                    secret_hash=team.secret_hash,
                    date=team.date or now_iso(),
                )
            )
            conn.commit()
        return team_id

    def find_by_name(self, name: str) -> Team | None:
        """Look up a team by exact name (case-sensitive). Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_teams.select().where(_teams.c.name == name)).fetchone()
        return _row_to_team(row) if row is not None else None

    def find_by_id(self, team_id: str) -> Team | None:
        """Look up a team by id. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_teams.select().where(_teams.c.id == team_id)).fetchone()
        return _row_to_team(row) if row is not None else None

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_team(row) -> Team:
    return Team(
        id=row.id,
        name=row.name,
        city=row.city,
        players=row.players,
        secret_hash=row.secret_hash,
        date=row.date,
    )
