"""
tests/test_post_routes.py -- Integration tests for post CRUD and ownership.

Coverage:
  - Auth failures: 401 without a token, with a forged token, with an expired token
  - Create / list / fetch / update / delete happy paths
  - Ownership: non-owners get 401 "team not authorized" on update and delete
  - 404 for unknown post ids, including after deletion
  - Unexpected store failures become a bare 500 with no internal detail
  - The end-to-end scenario: register, failed login, post, foreign delete attempt
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from auth.models import Identity


def _headers(token: str) -> dict[str, str]:
    return {"x-auth-token": token}


@pytest.fixture
def owner_token(register_team) -> str:
    return register_team("Owners FC")


@pytest.fixture
def rival_token(register_team) -> str:
    return register_team("Rivals FC")


@pytest.fixture(autouse=True)
def _reset_teams(api_client: TestClient):
    """Team names must be unique; give each test a clean slate."""
    yield
    engine = api_client.app.state.teams.engine
    with engine.connect() as conn:
        conn.exec_driver_sql("DELETE FROM teams")
        conn.commit()


def _create_post(client: TestClient, token: str, title: str = "t", body: str = "b") -> dict:
    resp = client.post("/api/posts", json={"title": title, "body": body}, headers=_headers(token))
    assert resp.status_code == 200, resp.text
    return resp.json()


class TestPostAuthFailure:
    def test_no_token(self, api_client: TestClient) -> None:
        resp = api_client.post("/api/posts", json={"title": "t", "body": "b"})
        assert resp.status_code == 401
        assert resp.json() == {"msg": "No token, authorization denied"}

    def test_forged_token(self, api_client: TestClient) -> None:
        resp = api_client.get("/api/posts", headers=_headers("not.a.token"))
        assert resp.status_code == 401
        assert resp.json() == {"msg": "Token is not valid"}

    def test_expired_token(self, api_client: TestClient, owner_token: str) -> None:
        team_id = api_client.get("/api/auth", headers=_headers(owner_token)).json()["id"]
        expired = api_client.app.state.tokens.issue(Identity(id=team_id), ttl_seconds=-1)
        resp = api_client.get("/api/posts", headers=_headers(expired))
        assert resp.status_code == 401
        assert resp.json() == {"msg": "Token is not valid"}


class TestPostCrud:
    def test_create_echoes_post(self, api_client: TestClient, owner_token: str) -> None:
        team_id = api_client.get("/api/auth", headers=_headers(owner_token)).json()["id"]
        post = _create_post(api_client, owner_token, title="Match day", body="Kickoff at 3")
        assert post["title"] == "Match day"
        assert post["body"] == "Kickoff at 3"
        assert post["team"] == team_id
        assert post["id"]
        assert post["date"]

    def test_create_requires_title_and_body(self, api_client: TestClient, owner_token: str) -> None:
        resp = api_client.post("/api/posts", json={"title": "", "body": "   "}, headers=_headers(owner_token))
        assert resp.status_code == 422
        assert resp.json()["errors"] == [
            {"msg": "Title text is required", "param": "title", "location": "body"},
            {"msg": "Body text is required", "param": "body", "location": "body"},
        ]

    def test_create_for_vanished_team(self, api_client: TestClient) -> None:
        token = api_client.app.state.tokens.issue(Identity(id="0" * 32))
        resp = api_client.post("/api/posts", json={"title": "t", "body": "b"}, headers=_headers(token))
        assert resp.status_code == 404
        assert resp.json() == {"msg": "Team not found"}

    def test_list_and_fetch(self, api_client: TestClient, owner_token: str, rival_token: str) -> None:
        mine = _create_post(api_client, owner_token, title="mine")
        theirs = _create_post(api_client, rival_token, title="theirs")

        listed = api_client.get("/api/posts", headers=_headers(owner_token))
        assert listed.status_code == 200
        ids = [p["id"] for p in listed.json()]
        assert mine["id"] in ids
        assert theirs["id"] in ids

        # Any authenticated team may read any post.
        fetched = api_client.get(f"/api/posts/{mine['id']}", headers=_headers(rival_token))
        assert fetched.status_code == 200
        assert fetched.json() == mine

    def test_fetch_unknown(self, api_client: TestClient, owner_token: str) -> None:
        resp = api_client.get("/api/posts/does-not-exist", headers=_headers(owner_token))
        assert resp.status_code == 404
        assert resp.json() == {"msg": "Post not found"}

    def test_owner_partial_update(self, api_client: TestClient, owner_token: str) -> None:
        post = _create_post(api_client, owner_token, title="old title", body="old body")
        resp = api_client.put(
            f"/api/posts/{post['id']}",
            json={"title": "new title", "body": ""},
            headers=_headers(owner_token),
        )
        assert resp.status_code == 200, resp.text
        data = resp.json()
        assert data["title"] == "new title"
        assert data["body"] == "old body"
        assert data["date"] == post["date"]

        stored = api_client.get(f"/api/posts/{post['id']}", headers=_headers(owner_token)).json()
        assert stored == data

    def test_non_owner_update_rejected(self, api_client: TestClient, owner_token: str, rival_token: str) -> None:
        post = _create_post(api_client, owner_token)
        resp = api_client.put(f"/api/posts/{post['id']}", json={"title": "hijack"}, headers=_headers(rival_token))
        assert resp.status_code == 401
        assert resp.json() == {"msg": "team not authorized"}
        stored = api_client.get(f"/api/posts/{post['id']}", headers=_headers(owner_token)).json()
        assert stored["title"] == post["title"]

    def test_update_unknown(self, api_client: TestClient, owner_token: str) -> None:
        resp = api_client.put("/api/posts/nope", json={"title": "x"}, headers=_headers(owner_token))
        assert resp.status_code == 404

    def test_delete_by_non_owner_then_owner(self, api_client: TestClient, owner_token: str, rival_token: str) -> None:
        post = _create_post(api_client, owner_token)

        denied = api_client.delete(f"/api/posts/{post['id']}", headers=_headers(rival_token))
        assert denied.status_code == 401
        assert denied.json() == {"msg": "team not authorized"}

        removed = api_client.delete(f"/api/posts/{post['id']}", headers=_headers(owner_token))
        assert removed.status_code == 200
        assert removed.json() == {"msg": "Post removed"}

        gone = api_client.get(f"/api/posts/{post['id']}", headers=_headers(owner_token))
        assert gone.status_code == 404

    def test_delete_unknown(self, api_client: TestClient, owner_token: str) -> None:
        resp = api_client.delete("/api/posts/nope", headers=_headers(owner_token))
        assert resp.status_code == 404
        assert resp.json() == {"msg": "Post not found"}


class TestServerError:
    def test_store_failure_is_opaque_500(self, api_client: TestClient, owner_token: str, monkeypatch) -> None:
        def _boom():
            raise RuntimeError("database exploded at /var/lib/secret.db")

        monkeypatch.setattr(api_client.app.state.posts, "list_all", _boom)
        # Separate client so the handler's response is returned instead of re-raised.
        client = TestClient(api_client.app, raise_server_exceptions=False)
        resp = client.get("/api/posts", headers=_headers(owner_token))
        assert resp.status_code == 500
        assert resp.json() == {"msg": "Server error"}
        assert "exploded" not in resp.text


def test_reds_scenario(api_client: TestClient, register_team) -> None:
    """Register, fail a login, post, then watch another team fail to delete it."""
    reds = api_client.post(
        "/api/team",
        json={"name": "Reds", "city": "Liverpool", "players": 13, "secret": "you-never-walk-alone"},
    )
    assert reds.status_code == 200
    reds_token = reds.json()["token"]

    bad_login = api_client.post("/api/login", json={"name": "Reds", "secret": "wrong"})
    assert bad_login.status_code == 400
    assert len(bad_login.json()["errors"]) == 1
    assert "msg" in bad_login.json()["errors"][0]

    post = api_client.post("/api/posts", json={"title": "t", "body": "b"}, headers=_headers(reds_token))
    assert post.status_code == 200
    assert post.json()["title"] == "t"
    assert post.json()["body"] == "b"
    post_id = post.json()["id"]

    blues_token = register_team("Blues")
    fetched = api_client.get(f"/api/posts/{post_id}", headers=_headers(blues_token))
    assert fetched.status_code == 200

    attempt = api_client.delete(f"/api/posts/{post_id}", headers=_headers(blues_token))
    assert attempt.status_code == 401
    assert attempt.json() == {"msg": "team not authorized"}
