"""
posts/models.py -- Domain dataclass for posts.

Pure data container. Ownership rules live in the route layer, persistence in
posts/store.py.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Post:
    """A post written by a team.

    team is the owning team's id. Only that team may update or delete the post.

    id is None before the record is written to the database.
    """

    team: str
    title: str
    body: str
    id: Optional[str] = None
    date: str = ""  # ISO 8601, set by store on insert unless provided
