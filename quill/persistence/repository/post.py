"""PostgreSQL implementation of Post repository."""

from typing import Optional

import logfire
from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quill.domain.error import ConflictError, PersistenceError
from quill.domain.model import Post
from quill.domain.repository.post import PostRepository
from quill.domain.value import PostId, Slug
from quill.persistence.mappers import post_to_dict, row_to_post
from quill.persistence.tables import POSTS_SLUG_CONSTRAINT, posts_table


def _is_slug_violation(error: IntegrityError) -> bool:
    """Whether an integrity error comes from the unique slug constraint."""
    constraint = getattr(getattr(error.orig, "__cause__", None), "constraint_name", None)
    if constraint is not None:
        return constraint == POSTS_SLUG_CONSTRAINT
    return POSTS_SLUG_CONSTRAINT in str(error.orig)


class PostgresPostRepository(PostRepository):
    """PostgreSQL implementation of PostRepository.

    Writes to the posts row run inside a SAVEPOINT so that losing a slug
    race rolls back only that write; the rest of the unit of work survives
    and the caller can retry with another slug.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, post_id: PostId) -> Optional[Post]:
        """Find a post by ID."""
        with logfire.span("post_repository.find_by_id", post_id=post_id):
            stmt = select(posts_table).where(posts_table.c.id == post_id)
            result = await self.session.execute(stmt)
            row = result.fetchone()

            if not row:
                logfire.warn("Post not found", post_id=post_id)
                return None

            return row_to_post(row._asdict())

    async def find_by_slug(self, slug: Slug) -> Optional[Post]:
        """Find a post by slug (soft-deleted posts included)."""
        with logfire.span("post_repository.find_by_slug", slug=str(slug)):
            stmt = select(posts_table).where(posts_table.c.slug == str(slug))
            result = await self.session.execute(stmt)
            row = result.fetchone()

            if not row:
                logfire.warn("Post not found by slug", slug=str(slug))
                return None

            return row_to_post(row._asdict())

    async def slug_exists(self, slug: Slug) -> bool:
        """Check if a slug exists (globally - includes deleted posts)."""
        with logfire.span("post_repository.slug_exists", slug=str(slug)):
            stmt = (
                select(func.count())
                .select_from(posts_table)
                .where(posts_table.c.slug == str(slug))
            )
            result = await self.session.execute(stmt)
            count = result.scalar()
            exists = (count or 0) > 0

            logfire.debug("Slug existence check", slug=str(slug), exists=exists)
            return exists

    async def insert(self, post: Post) -> PostId:
        """Insert a new post row and return its id."""
        with logfire.span("post_repository.insert", slug=post.slug):
            stmt = (
                insert(posts_table)
                .values(**post_to_dict(post))
                .returning(posts_table.c.id)
            )
            try:
                async with self.session.begin_nested():
                    result = await self.session.execute(stmt)
                    post_id = PostId(result.scalar_one())
            except IntegrityError as e:
                if _is_slug_violation(e):
                    logfire.warn("Slug claimed by another writer", slug=post.slug)
                    raise ConflictError(post.slug) from e
                raise PersistenceError(f"Post insert failed: {e.orig}", stage="post") from e
            except SQLAlchemyError as e:
                raise PersistenceError(f"Post insert failed: {e}", stage="post") from e

            logfire.info("Post inserted", post_id=post_id, slug=post.slug)
            return post_id

    async def update(self, post: Post, key_slug: str) -> None:
        """Overwrite the row currently holding ``key_slug``."""
        with logfire.span(
            "post_repository.update", post_id=post.id, key_slug=key_slug, slug=post.slug
        ):
            stmt = (
                update(posts_table)
                .where(posts_table.c.slug == key_slug)
                .values(**post_to_dict(post))
            )
            try:
                async with self.session.begin_nested():
                    result = await self.session.execute(stmt)
            except IntegrityError as e:
                if _is_slug_violation(e):
                    logfire.warn("Slug claimed by another writer", slug=post.slug)
                    raise ConflictError(post.slug) from e
                raise PersistenceError(
                    f"Post update failed: {e.orig}", stage="post", post_id=post.id
                ) from e
            except SQLAlchemyError as e:
                raise PersistenceError(
                    f"Post update failed: {e}", stage="post", post_id=post.id
                ) from e

            if result.rowcount == 0:
                raise PersistenceError(
                    f"No post row holds slug {key_slug!r}", stage="post", post_id=post.id
                )

    async def delete(self, post_id: PostId) -> None:
        """Delete a post row (hard delete)."""
        with logfire.span("post_repository.delete", post_id=post_id):
            stmt = delete(posts_table).where(posts_table.c.id == post_id)
            try:
                result = await self.session.execute(stmt)
                await self.session.flush()
            except SQLAlchemyError as e:
                raise PersistenceError(
                    f"Post delete failed: {e}", stage="post", post_id=post_id
                ) from e

            if result.rowcount == 0:
                raise PersistenceError(
                    f"Post {post_id} not found", stage="post", post_id=post_id
                )
