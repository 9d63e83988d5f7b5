"""
posts/store.py -- SQLAlchemy-backed persistence layer for posts.

Uses SQLAlchemy Core (not ORM) so the Post dataclass in posts/models.py
remains the authoritative domain representation. Swapping SQLite for
PostgreSQL is a connection string change.

Pattern: Repository + Data Mapper. PostStore is the repository, _row_to_post
the mapper. Route handlers never touch SQL directly.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = PostStore("sqlite:///teamboard.db")
    post_id = store.create(Post(team=team_id, title="Match day", body="..."))
    post = store.find_by_id(post_id)
    post.title = "Rescheduled"
    store.save(post)
    store.delete(post_id)
    store.close()
"""

from typing import Optional

from sqlalchemy import Column, MetaData, String, Table, Text
from sqlalchemy.engine import Engine

from core.config import get_settings
from core.db import make_engine, new_record_id, now_iso
from posts.models import Post

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_posts = Table(
    "posts",
    _metadata,
    Column("id", String(32), primary_key=True),  # uuid4 hex
    Column("team", String(32), nullable=False, index=True),  # owning team id
    Column("title", Text, nullable=False),
    Column("body", Text, nullable=False),
    Column("date", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class PostStore:
    """Repository for Post records."""

    def __init__(self, db_url: Optional[str] = None) -> None:
        self.engine: Engine = make_engine(db_url or get_settings().database_url)
        _metadata.create_all(self.engine)

    def create(self, post: Post) -> str:
        """Insert a new post and return its assigned id."""
        post_id = new_record_id()
        with self.engine.connect() as conn:
            conn.execute(
                _posts.insert().values(
                    id=post_id,
                    team=post.team,
                    title=post.title,
                    body=post.body,
                    date=post.date or now_iso(),
                )
            )
            conn.commit()
        return post_id

    def find_by_id(self, post_id: str) -> Optional[Post]:
        """Look up a post by id. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_posts.select().where(_posts.c.id == post_id)).fetchone()
        return _row_to_post(row) if row is not None else None

    def list_all(self) -> list[Post]:
        """Return every post, newest first."""
        with self.engine.connect() as conn:
            rows = conn.execute(_posts.select().order_by(_posts.c.date.desc())).fetchall()
        return [_row_to_post(r) for r in rows]

    def save(self, post: Post) -> bool:
        """Write title and body of an existing post. Returns False if it no longer exists.

        Owner and date are immutable after creation.
        """
        with self.engine.connect() as conn:
            result = conn.execute(
                _posts.update().where(_posts.c.id == post.id).values(title=post.title, body=post.body)
            )
            conn.commit()
        return result.rowcount > 0

    def delete(self, post_id: str) -> bool:
        """Delete a post. Returns False if it did not exist."""
        with self.engine.connect() as conn:
            result = conn.execute(_posts.delete().where(_posts.c.id == post_id))
            conn.commit()
        return result.rowcount > 0

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_post(row) -> Post:
    return Post(
        id=row.id,
        team=row.team,
        title=row.title,
        body=row.body,
        date=row.date,
    )
