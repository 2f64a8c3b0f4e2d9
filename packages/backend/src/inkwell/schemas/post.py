"""Pydantic schemas for posts and comments."""

from datetime import datetime

from pydantic import BaseModel, Field


class AuthorRead(BaseModel):
    id: int
    username: str

    model_config = {"from_attributes": True}


# ─── Posts ──────────────────────────────────────────────

class PostWrite(BaseModel):
    """Body of both create and update; title and content are always required."""
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)


class PostCreated(BaseModel):
    message: str = "Post created successfully"
    post_id: int
    title: str
    user_id: int


class PostRead(BaseModel):
    id: int
    title: str
    content: str
    user_id: int
    author: AuthorRead
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# ─── Comments ───────────────────────────────────────────

class CommentWrite(BaseModel):
    content: str = Field(..., min_length=1)


class CommentCreated(BaseModel):
    message: str = "Comment created successfully"
    comment_id: int
    post_id: int


class CommentRead(BaseModel):
    id: int
    content: str
    user_id: int
    post_id: int
    author: AuthorRead
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PostDetail(PostRead):
    """Post with its live comments, oldest first."""
    comments: list[CommentRead] = []


class Message(BaseModel):
    message: str
