"""Post service — business logic for posts and comments.

Learn: Service layer separates business logic from HTTP routing.
API routes call services, services call the stores.
Every mutation walks the same path:

    token validated (route dependency)
      → resource fetched        (404 if missing or soft-deleted)
      → ownership confirmed     (403 if someone else's)
      → body validated          (400 if malformed)
      → change applied

Owner ids are written once in create_* and never passed to an update.
"""

from typing import Any, Optional, Sequence

import structlog

from inkwell.auth.dependencies import CurrentIdentity
from inkwell.auth.ownership import authorize_owner, ensure_exists
from inkwell.db.models import Comment, Post
from inkwell.db.repository import SqlCommentStore, SqlPostStore
from inkwell.schemas.post import CommentWrite, PostWrite
from inkwell.schemas.validation import parse_body

logger = structlog.get_logger()


class PostService:
    """Posts and their comments."""

    def __init__(self, posts: SqlPostStore, comments: SqlCommentStore):
        self.posts = posts
        self.comments = comments

    # ─── Posts ──────────────────────────────────────────

    async def list_posts(self) -> Sequence[Post]:
        return await self.posts.list_posts()

    async def get_post(self, post_id: int) -> Post:
        post = await self.posts.get_post_detail(post_id)
        return ensure_exists(post, "post", post_id)

    async def create_post(
        self, identity: CurrentIdentity, title: str, content: str
    ) -> Post:
        post = await self.posts.insert_resource(
            title=title, content=content, user_id=identity.user_id
        )
        logger.info("posts.created", post_id=post.id, user_id=identity.user_id)
        return post

    async def update_post(
        self, identity: CurrentIdentity, post_id: int, payload: Any
    ) -> Post:
        post = authorize_owner(
            identity, await self.posts.find_resource_by_id(post_id), "post", post_id
        )
        body = parse_body(PostWrite, payload)
        post = await self.posts.update_resource(
            post, title=body.title, content=body.content
        )
        logger.info("posts.updated", post_id=post.id, user_id=identity.user_id)
        return post

    async def delete_post(self, identity: CurrentIdentity, post_id: int) -> None:
        post = authorize_owner(
            identity, await self.posts.find_resource_by_id(post_id), "post", post_id
        )
        await self.posts.delete_resource(post)
        logger.info("posts.deleted", post_id=post_id, user_id=identity.user_id)

    # ─── Comments ───────────────────────────────────────

    async def list_comments(self, post_id: int) -> Sequence[Comment]:
        return await self.comments.list_for_post(post_id)

    async def create_comment(
        self, identity: CurrentIdentity, post_id: int, payload: Any
    ) -> Comment:
        """Any authenticated user may comment, but only on a live post."""
        ensure_exists(await self.posts.find_resource_by_id(post_id), "post", post_id)
        body = parse_body(CommentWrite, payload)
        comment = await self.comments.insert_resource(
            content=body.content, user_id=identity.user_id, post_id=post_id
        )
        logger.info(
            "comments.created",
            comment_id=comment.id,
            post_id=post_id,
            user_id=identity.user_id,
        )
        return comment

    async def update_comment(
        self,
        identity: CurrentIdentity,
        post_id: int,
        comment_id: int,
        payload: Any,
    ) -> Comment:
        comment = authorize_owner(
            identity,
            await self._find_comment(post_id, comment_id),
            "comment",
            comment_id,
        )
        body = parse_body(CommentWrite, payload)
        comment = await self.comments.update_resource(comment, content=body.content)
        logger.info("comments.updated", comment_id=comment_id, user_id=identity.user_id)
        return comment

    async def delete_comment(
        self, identity: CurrentIdentity, post_id: int, comment_id: int
    ) -> None:
        comment = authorize_owner(
            identity,
            await self._find_comment(post_id, comment_id),
            "comment",
            comment_id,
        )
        await self.comments.delete_resource(comment)
        logger.info("comments.deleted", comment_id=comment_id, user_id=identity.user_id)

    async def _find_comment(self, post_id: int, comment_id: int) -> Optional[Comment]:
        """A comment only exists under the post it was written on."""
        comment = await self.comments.find_resource_by_id(comment_id)
        if comment is None or comment.post_id != post_id:
            return None
        return comment
