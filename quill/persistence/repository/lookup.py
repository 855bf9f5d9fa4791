"""PostgreSQL implementation of the lookup table repository."""

import logfire
from sqlalchemy import Table, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from quill.domain.repository.lookup import LookupRepository
from quill.persistence.tables import poststatus_table, posttype_table


class PostgresLookupRepository(LookupRepository):
    """Reads poststatus and posttype.

    Lives for the whole process next to the registry cache it feeds, so it
    opens a short session of its own per read instead of borrowing the
    request session.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize repository.

        Args:
            session_factory: Factory for short-lived read sessions
        """
        self.session_factory = session_factory

    async def _list(self, table: Table) -> list[tuple[str, int]]:
        with logfire.span("lookup_repository.list", table=table.name):
            stmt = select(table.c.name, table.c.id).order_by(table.c.id)
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                return [(row.name, row.id) for row in result.fetchall()]

    async def list_statuses(self) -> list[tuple[str, int]]:
        return await self._list(poststatus_table)

    async def list_types(self) -> list[tuple[str, int]]:
        return await self._list(posttype_table)
