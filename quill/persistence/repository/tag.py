"""PostgreSQL implementation of Tag repository."""

import logfire
from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quill.domain.error import PersistenceError
from quill.domain.repository.tag import TagRepository
from quill.domain.value import PostId, slugify
from quill.persistence.tables import tag2post_table, tags_table


class PostgresTagRepository(TagRepository):
    """PostgreSQL implementation of TagRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async database session
        """
        self.session = session

    async def find_by_post(self, post_id: PostId) -> list[str]:
        """Tag texts of a post, in association order."""
        stmt = (
            select(tags_table.c.tag_text)
            .select_from(tag2post_table)
            .join(tags_table, tag2post_table.c.tag_id == tags_table.c.id)
            .where(tag2post_table.c.post_id == post_id)
            .order_by(tag2post_table.c.position)
        )
        result = await self.session.execute(stmt)
        return [row.tag_text for row in result.fetchall()]

    async def _ensure_tags(self, tags: list[str]) -> dict[str, int]:
        """Insert missing tags and return a tag_text -> id map."""
        stmt = (
            insert(tags_table)
            .values([{"tag_text": tag, "tag_slug": slugify(tag)} for tag in tags])
            .on_conflict_do_nothing(index_elements=["tag_text"])
        )
        await self.session.execute(stmt)

        lookup = select(tags_table.c.id, tags_table.c.tag_text).where(
            tags_table.c.tag_text.in_(tags)
        )
        result = await self.session.execute(lookup)
        return {row.tag_text: row.id for row in result.fetchall()}

    async def replace_for_post(self, post_id: PostId, tags: list[str]) -> None:
        """Replace every association of a post with ``tags``."""
        with logfire.span("tag_repository.replace_for_post", post_id=post_id, tags=tags):
            try:
                await self.session.execute(
                    delete(tag2post_table).where(tag2post_table.c.post_id == post_id)
                )
                if tags:
                    tag_ids = await self._ensure_tags(tags)
                    await self.session.execute(
                        insert(tag2post_table).values(
                            [
                                {"tag_id": tag_ids[tag], "post_id": post_id, "position": i}
                                for i, tag in enumerate(tags)
                            ]
                        )
                    )
                await self.session.flush()
            except SQLAlchemyError as e:
                raise PersistenceError(
                    f"Tag association write failed: {e}", stage="tags", post_id=post_id
                ) from e
