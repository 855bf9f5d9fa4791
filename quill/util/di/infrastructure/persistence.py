"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from quill.config import Settings
from quill.domain.repository import (
    CommentRepository,
    LookupRepository,
    PostInfoRepository,
    PostRepository,
    TagRepository,
    UserRepository,
)
from quill.persistence.database import create_engine, create_session_factory
from quill.persistence.repository import (
    PostgresCommentRepository,
    PostgresLookupRepository,
    PostgresPostInfoRepository,
    PostgresPostRepository,
    PostgresTagRepository,
    PostgresUserRepository,
)
from quill.util.di.base import ProviderBase
from quill.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """PostgreSQL persistence.

    The engine, the session factory and the lookup repository live for the
    process. Everything else is bound to one request-scoped session, which
    is the unit of work a post save runs in.
    """

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    def get_engine(self, settings: Settings) -> AsyncEngine:
        engine = create_engine(settings)
        instrument_sqlalchemy(engine)
        return engine

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        return create_session_factory(engine)

    @provide(scope=Scope.APP)
    def get_lookup_repository(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> LookupRepository:
        """Lookup tables are read outside any unit of work."""
        return PostgresLookupRepository(session_factory)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AsyncSession]:
        """Unit-of-work session.

        Post row, info, tag and comment writes all share it. It commits when
        the request scope closes cleanly and rolls back otherwise, so a
        failed sub-write never leaves half a save behind.
        """
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
                logfire.debug("Unit of work committed")
            except Exception as e:
                logfire.warn(
                    "Unit of work rolled back",
                    error=str(e),
                    stage=getattr(e, "stage", None),
                )
                await session.rollback()
                raise

    @provide(scope=Scope.REQUEST)
    def get_post_repository(self, session: AsyncSession) -> PostRepository:
        return PostgresPostRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_post_info_repository(self, session: AsyncSession) -> PostInfoRepository:
        return PostgresPostInfoRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_tag_repository(self, session: AsyncSession) -> TagRepository:
        return PostgresTagRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_comment_repository(self, session: AsyncSession) -> CommentRepository:
        return PostgresCommentRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_user_repository(self, session: AsyncSession) -> UserRepository:
        return PostgresUserRepository(session)
