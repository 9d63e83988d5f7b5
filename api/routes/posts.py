"""
api/routes/posts.py -- Post CRUD endpoints.

Routes:
  POST   /api/posts            -- create a post owned by the caller
  GET    /api/posts            -- list all posts, newest first
  GET    /api/posts/{post_id}  -- fetch one post
  PUT    /api/posts/{post_id}  -- update title/body (owner only)
  DELETE /api/posts/{post_id}  -- delete (owner only)

Every route requires a valid token. Ownership is checked here, after the
lookup, so a missing post is reported as 404 before any ownership answer.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from api.models import MessageResponse, PostCreate, PostResponse, PostUpdate
from auth.dependencies import get_current_identity
from auth.models import Identity
from auth.store import TeamStore
from core.errors import Forbidden, NotFound
from posts.models import Post
from posts.store import PostStore

router = APIRouter()

_NOT_FOUND = "Post not found"
_NOT_OWNER = "team not authorized"


def _get_post_or_404(posts: PostStore, post_id: str) -> Post:
    post = posts.find_by_id(post_id)
    if post is None:
        raise NotFound(_NOT_FOUND)
    return post


def _require_owner(post: Post, identity: Identity) -> None:
    if post.team != identity.id:
        raise Forbidden(_NOT_OWNER)


@router.post("/posts", response_model=PostResponse)
def create_post(
    request: Request,
    body: PostCreate,
    identity: Identity = Depends(get_current_identity),
) -> PostResponse:
    """Create a post owned by the authenticated team and echo it back."""
    teams: TeamStore = request.app.state.teams
    posts: PostStore = request.app.state.posts

    team = teams.find_by_id(identity.id)
    if team is None:
        raise NotFound("Team not found")

    post_id = posts.create(Post(team=team.id, title=body.title, body=body.body))
    return PostResponse.from_post(_get_post_or_404(posts, post_id))


@router.get("/posts", response_model=list[PostResponse])
def list_posts(request: Request, identity: Identity = Depends(get_current_identity)) -> list[PostResponse]:
    posts: PostStore = request.app.state.posts
    return [PostResponse.from_post(p) for p in posts.list_all()]


@router.get("/posts/{post_id}", response_model=PostResponse)
def get_post(
    request: Request,
    post_id: str,
    identity: Identity = Depends(get_current_identity),
) -> PostResponse:
    posts: PostStore = request.app.state.posts
    return PostResponse.from_post(_get_post_or_404(posts, post_id))


@router.put("/posts/{post_id}", response_model=PostResponse)
def update_post(
    request: Request,
    post_id: str,
    body: PostUpdate,
    identity: Identity = Depends(get_current_identity),
) -> PostResponse:
    """Update a post. Fields left out or empty keep their current value."""
    posts: PostStore = request.app.state.posts
    post = _get_post_or_404(posts, post_id)
    _require_owner(post, identity)

    post.title = body.title or post.title
    post.body = body.body or post.body
    if not posts.save(post):
        # Deleted between the lookup and the write.
        raise NotFound(_NOT_FOUND)
    return PostResponse.from_post(post)


@router.delete("/posts/{post_id}", response_model=MessageResponse)
def delete_post(
    request: Request,
    post_id: str,
    identity: Identity = Depends(get_current_identity),
) -> MessageResponse:
    posts: PostStore = request.app.state.posts
    post = _get_post_or_404(posts, post_id)
    _require_owner(post, identity)

    if not posts.delete(post.id):
        raise NotFound(_NOT_FOUND)
    return MessageResponse(msg="Post removed")
