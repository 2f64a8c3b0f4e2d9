"""Persistence collaborators used by the auth and post services.

Learn: The services never build queries themselves. They talk to two
small interfaces:

- CredentialStore — look up and insert user accounts
- ResourceStore   — find/insert/update/soft-delete an owned resource by id

The SQLAlchemy implementations below are what the app wires in. Unit
tests can hand the services any object with the same async methods.

Every write commits immediately; the ownership check and the write that
follows it are two separate steps, not one transaction.
"""

from datetime import datetime, timezone
from typing import Any, Generic, Optional, Protocol, Sequence, TypeVar

import structlog
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from inkwell.db.models import Base, Comment, Post, User
from inkwell.errors import Conflict, StorageFailure

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=Base)

# Primary keys are 32-bit INTEGER columns; anything outside this range
# cannot exist and must not reach the driver.
MAX_ID = 2**31 - 1


def id_in_range(resource_id: int) -> bool:
    return 1 <= resource_id <= MAX_ID


# ─── Interfaces ─────────────────────────────────────────


class CredentialStore(Protocol):
    async def find_by_username_or_email(
        self, username: str, email: str
    ) -> Optional[User]: ...

    async def find_by_username(self, username: str) -> Optional[User]: ...

    async def get_user(self, user_id: int) -> Optional[User]: ...

    async def insert_credential(
        self, username: str, email: str, password_hash: str
    ) -> User: ...


class ResourceStore(Protocol[ModelT]):
    async def find_resource_by_id(self, resource_id: int) -> Optional[ModelT]: ...

    async def insert_resource(self, **fields: Any) -> ModelT: ...

    async def update_resource(self, resource: ModelT, **fields: Any) -> ModelT: ...

    async def delete_resource(self, resource: ModelT) -> None: ...


# ─── SQLAlchemy implementations ─────────────────────────


class SqlCredentialStore:
    """User accounts in the users table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_username_or_email(
        self, username: str, email: str
    ) -> Optional[User]:
        q = select(User).where(
            or_(User.username == username, User.email == email),
            User.deleted_at.is_(None),
        )
        result = await self.db.execute(q)
        return result.scalars().first()

    async def find_by_username(self, username: str) -> Optional[User]:
        q = select(User).where(User.username == username, User.deleted_at.is_(None))
        result = await self.db.execute(q)
        return result.scalars().first()

    async def get_user(self, user_id: int) -> Optional[User]:
        if not id_in_range(user_id):
            return None
        q = select(User).where(User.id == user_id, User.deleted_at.is_(None))
        result = await self.db.execute(q)
        return result.scalars().first()

    async def insert_credential(
        self, username: str, email: str, password_hash: str
    ) -> User:
        user = User(username=username, email=email, password_hash=password_hash)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration; the unique
            # constraints caught what the pre-check could not.
            await self.db.rollback()
            raise Conflict("Username or email already exists")
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("db.insert_user_failed", username=username, error=str(e))
            raise StorageFailure("Failed to register user due to database error")
        return user


class SqlResourceStore(Generic[ModelT]):
    """Owned rows (posts, comments) with soft delete."""

    def __init__(self, db: AsyncSession, model: type[ModelT]):
        self.db = db
        self.model = model

    def _live(self):
        return select(self.model).where(self.model.deleted_at.is_(None))

    async def find_resource_by_id(self, resource_id: int) -> Optional[ModelT]:
        if not id_in_range(resource_id):
            return None
        q = self._live().where(self.model.id == resource_id)
        result = await self.db.execute(q)
        return result.scalars().first()

    async def insert_resource(self, **fields: Any) -> ModelT:
        resource = self.model(**fields)
        self.db.add(resource)
        await self._commit("insert")
        return resource

    async def update_resource(self, resource: ModelT, **fields: Any) -> ModelT:
        for name, value in fields.items():
            setattr(resource, name, value)
        await self._commit("update")
        return resource

    async def delete_resource(self, resource: ModelT) -> None:
        resource.deleted_at = datetime.now(timezone.utc)
        await self._commit("delete")

    async def _commit(self, action: str) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                "db.write_failed",
                table=self.model.__tablename__,
                action=action,
                error=str(e),
            )
            raise StorageFailure(
                f"Failed to {action} {self.model.__tablename__[:-1]} in database"
            )


class SqlPostStore(SqlResourceStore[Post]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, Post)

    async def list_posts(self) -> Sequence[Post]:
        """All live posts, newest first, with their author loaded."""
        q = (
            self._live()
            .options(selectinload(Post.author))
            .order_by(Post.created_at.desc(), Post.id.desc())
        )
        result = await self.db.execute(q)
        return result.scalars().all()

    async def get_post_detail(self, post_id: int) -> Optional[Post]:
        """One live post with author, comments, and comment authors."""
        if not id_in_range(post_id):
            return None
        q = (
            self._live()
            .where(Post.id == post_id)
            .options(
                selectinload(Post.author),
                selectinload(Post.comments).selectinload(Comment.author),
            )
        )
        result = await self.db.execute(q)
        return result.scalars().first()


class SqlCommentStore(SqlResourceStore[Comment]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, Comment)

    async def list_for_post(self, post_id: int) -> Sequence[Comment]:
        """Live comments on a post, oldest first, with their author loaded."""
        if not id_in_range(post_id):
            return []
        q = (
            self._live()
            .where(Comment.post_id == post_id)
            .options(selectinload(Comment.author))
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        )
        result = await self.db.execute(q)
        return result.scalars().all()
