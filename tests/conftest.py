"""
tests/conftest.py -- Shared test fixtures for Teamboard integration tests.

This module provides:
  - _make_test_stores(): creates isolated in-memory DBs for teams + posts
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - api_client: TestClient against the real app with isolated stores
  - register_team(): helper that registers a team and returns its token

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker thread.

DEBUG must be set before any app import so get_settings() auto-generates
SECRET_KEY instead of raising. BCRYPT_ROUNDS=4 keeps hashing fast.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: Set before any core/auth/api import.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.store import TeamStore
from auth.tokens import TokenService
from core.config import get_settings
from posts.store import PostStore

DEFAULT_SECRET = "kickoff-123"


def _make_test_stores(db_suffix: str) -> tuple[TeamStore, PostStore]:
    """Create isolated named shared-memory SQLite stores.

    Args:
        db_suffix: Unique string appended to the DB name so test modules
                   don't share state.
    """
    teams_url = f"sqlite:///file:test_teams_{db_suffix}?mode=memory&cache=shared&uri=true"
    posts_url = f"sqlite:///file:test_posts_{db_suffix}?mode=memory&cache=shared&uri=true"
    return TeamStore(teams_url), PostStore(posts_url)


def _patch_lifespan(teams: TeamStore, posts: PostStore):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        settings = get_settings()
        app.state.settings = settings
        app.state.tokens = TokenService(settings)
        app.state.teams = teams
        app.state.posts = posts
        yield

    return test_lifespan


@pytest.fixture(scope="module")
def api_client(request) -> Generator[TestClient, None, None]:
    """Yield a TestClient over the real app with isolated in-memory stores.

    Module-scoped: one client and one pair of databases per test module.
    """
    teams, posts = _make_test_stores(request.module.__name__.rsplit(".", 1)[-1])
    app.router.lifespan_context = _patch_lifespan(teams, posts)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client

    teams.close()
    posts.close()


@pytest.fixture
def register_team(api_client: TestClient):
    """Return a helper that registers a team through the API and returns its token."""

    def _register(name: str, *, city: str = "Leeds", players: int = 13, secret: str = DEFAULT_SECRET) -> str:
        resp = api_client.post(
            "/api/team",
            json={"name": name, "city": city, "players": players, "secret": secret},
        )
        assert resp.status_code == 200, f"Registration failed: {resp.status_code} {resp.text}"
        return resp.json()["token"]

    return _register
