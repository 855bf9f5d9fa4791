"""PostgreSQL implementation of Comment repository."""

from typing import List

import logfire
from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quill.domain.error import PersistenceError
from quill.domain.model import Comment
from quill.domain.repository import CommentRepository
from quill.domain.value import PostId
from quill.persistence.mappers import comment_to_dict, row_to_comment
from quill.persistence.tables import comments_table


class PostgresCommentRepository(CommentRepository):
    """PostgreSQL implementation of CommentRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_post(self, post_id: PostId) -> List[Comment]:
        """Find all comments for a post, oldest first."""
        stmt = (
            select(comments_table)
            .where(comments_table.c.post_id == post_id)
            .order_by(comments_table.c.date, comments_table.c.id)
        )
        result = await self.session.execute(stmt)
        return [row_to_comment(row._asdict()) for row in result.fetchall()]

    async def count_by_post(self, post_id: PostId) -> int:
        stmt = (
            select(func.count())
            .select_from(comments_table)
            .where(comments_table.c.post_id == post_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def delete_by_post(self, post_id: PostId) -> int:
        """Delete every comment of a post."""
        with logfire.span("comment_repository.delete_by_post", post_id=post_id):
            stmt = delete(comments_table).where(comments_table.c.post_id == post_id)
            try:
                result = await self.session.execute(stmt)
                await self.session.flush()
            except SQLAlchemyError as e:
                raise PersistenceError(
                    f"Comment delete failed: {e}", stage="comments", post_id=post_id
                ) from e
            return result.rowcount

    async def save(self, comment: Comment) -> Comment:
        """Save a comment (create or update)."""
        values = comment_to_dict(comment)
        stmt = insert(comments_table).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["id"],
            set_={k: v for k, v in values.items() if k != "id"},
        )
        await self.session.execute(stmt)
        await self.session.flush()
        return comment
