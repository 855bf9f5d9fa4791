"""PostgreSQL implementation of User repository.

Posts only read users (author lookup); ``save`` exists for seeding and
for the surrounding application.
"""

from typing import Optional

import logfire
from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from quill.domain.model import User
from quill.domain.repository import UserRepository
from quill.domain.value import UserId
from quill.persistence.mappers import row_to_user, user_to_dict
from quill.persistence.tables import users_table


class PostgresUserRepository(UserRepository):
    """PostgreSQL implementation of UserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a post author by id."""
        result = await self.session.execute(
            select(users_table).where(users_table.c.id == user_id)
        )
        row = result.mappings().first()
        if row is None:
            logfire.debug("User not found", user_id=user_id)
            return None
        return row_to_user(dict(row))

    async def save(self, user: User) -> User:
        """Insert a user, or overwrite the one with the same id."""
        values = user_to_dict(user)
        stmt = (
            insert(users_table)
            .values(**values)
            .on_conflict_do_update(
                index_elements=["id"],
                set_={"username": values["username"], "email": values["email"]},
            )
        )
        await self.session.execute(stmt)
        await self.session.flush()
        return user
