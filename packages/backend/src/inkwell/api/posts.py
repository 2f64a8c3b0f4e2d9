"""Post and comment API routes.

Learn: Each route function receives dependencies via Depends() and
delegates to PostService. GET routes are public. POST/PUT/DELETE take
a CurrentIdentity, so the token is validated before the handler body
runs; PostService then does the 404/403 checks. Update and comment
bodies arrive as raw JSON and are validated only after those checks.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from inkwell.auth.dependencies import CurrentIdentity, get_current_identity
from inkwell.db.engine import get_db
from inkwell.db.repository import SqlCommentStore, SqlPostStore
from inkwell.schemas.post import (
    CommentCreated,
    CommentRead,
    Message,
    PostCreated,
    PostDetail,
    PostRead,
    PostWrite,
)
from inkwell.services.post_service import PostService

router = APIRouter(prefix="/api/v1/posts")


def _svc(db: AsyncSession = Depends(get_db)) -> PostService:
    return PostService(posts=SqlPostStore(db), comments=SqlCommentStore(db))


# ─── Posts ──────────────────────────────────────────────

@router.get("", response_model=list[PostRead])
async def list_posts(svc: PostService = Depends(_svc)):
    return await svc.list_posts()


@router.get("/{post_id}", response_model=PostDetail)
async def get_post(post_id: int, svc: PostService = Depends(_svc)):
    return await svc.get_post(post_id)


@router.post("", response_model=PostCreated, status_code=201)
async def create_post(
    body: PostWrite,
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: PostService = Depends(_svc),
):
    post = await svc.create_post(identity, title=body.title, content=body.content)
    return PostCreated(post_id=post.id, title=post.title, user_id=post.user_id)


@router.put("/{post_id}", response_model=Message)
async def update_post(
    post_id: int,
    payload: Any = Body(None),
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: PostService = Depends(_svc),
):
    """Update a post. Only its author may do this."""
    await svc.update_post(identity, post_id, payload)
    return Message(message="Post updated successfully")


@router.delete("/{post_id}", response_model=Message)
async def delete_post(
    post_id: int,
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: PostService = Depends(_svc),
):
    """Soft-delete a post. Only its author may do this."""
    await svc.delete_post(identity, post_id)
    return Message(message="Post deleted successfully")


# ─── Comments ───────────────────────────────────────────

@router.get("/{post_id}/comments", response_model=list[CommentRead])
async def list_comments(post_id: int, svc: PostService = Depends(_svc)):
    return await svc.list_comments(post_id)


@router.post("/{post_id}/comments", response_model=CommentCreated, status_code=201)
async def create_comment(
    post_id: int,
    payload: Any = Body(None),
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: PostService = Depends(_svc),
):
    comment = await svc.create_comment(identity, post_id, payload)
    return CommentCreated(comment_id=comment.id, post_id=post_id)


@router.put("/{post_id}/comments/{comment_id}", response_model=Message)
async def update_comment(
    post_id: int,
    comment_id: int,
    payload: Any = Body(None),
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: PostService = Depends(_svc),
):
    await svc.update_comment(identity, post_id, comment_id, payload)
    return Message(message="Comment updated successfully")


@router.delete("/{post_id}/comments/{comment_id}", response_model=Message)
async def delete_comment(
    post_id: int,
    comment_id: int,
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: PostService = Depends(_svc),
):
    await svc.delete_comment(identity, post_id, comment_id)
    return Message(message="Comment deleted successfully")
