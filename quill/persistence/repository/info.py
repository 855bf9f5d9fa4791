"""PostgreSQL implementation of the post info repository."""

from typing import Any

import logfire
from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quill.domain.error import PersistenceError
from quill.domain.repository.info import PostInfoRepository
from quill.domain.value import PostId
from quill.persistence.tables import postinfo_table


class PostgresPostInfoRepository(PostInfoRepository):
    """PostgreSQL implementation of PostInfoRepository.

    Values are stored as JSONB so numbers, booleans and lists come back with
    their type.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async database session
        """
        self.session = session

    async def load(self, post_id: PostId) -> dict[str, Any]:
        stmt = select(postinfo_table.c.name, postinfo_table.c.value).where(
            postinfo_table.c.post_id == post_id
        )
        result = await self.session.execute(stmt)
        return {row.name: row.value for row in result.fetchall()}

    async def save(
        self, post_id: PostId, values: dict[str, Any], removed: set[str]
    ) -> None:
        with logfire.span(
            "post_info_repository.save",
            post_id=post_id,
            changed=sorted(values),
            removed=sorted(removed),
        ):
            try:
                if removed:
                    await self.session.execute(
                        delete(postinfo_table).where(
                            postinfo_table.c.post_id == post_id,
                            postinfo_table.c.name.in_(removed),
                        )
                    )
                if values:
                    stmt = insert(postinfo_table).values(
                        [
                            {"post_id": post_id, "name": name, "value": value}
                            for name, value in values.items()
                        ]
                    )
                    stmt = stmt.on_conflict_do_update(
                        index_elements=["post_id", "name"],
                        set_={"value": stmt.excluded.value},
                    )
                    await self.session.execute(stmt)
                await self.session.flush()
            except SQLAlchemyError as e:
                raise PersistenceError(
                    f"Post info write failed: {e}", stage="info", post_id=post_id
                ) from e

    async def delete_for_post(self, post_id: PostId) -> None:
        try:
            await self.session.execute(
                delete(postinfo_table).where(postinfo_table.c.post_id == post_id)
            )
            await self.session.flush()
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Post info delete failed: {e}", stage="info", post_id=post_id
            ) from e
