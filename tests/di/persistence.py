"""Mock persistence providers for testing."""

from dishka import Scope, provide

from quill.domain.repository import (
    CommentRepository,
    LookupRepository,
    PostInfoRepository,
    PostRepository,
    TagRepository,
    UserRepository,
)
from quill.persistence.repository.inmemory import (
    InMemoryCommentRepository,
    InMemoryLookupRepository,
    InMemoryPostInfoRepository,
    InMemoryPostRepository,
    InMemoryTagRepository,
    InMemoryUserRepository,
)
from quill.util.di.infrastructure.persistence import PersistenceProvider


class MockPersistenceProvider(PersistenceProvider):
    """Mock persistence provider using in-memory repositories.

    Uses REQUEST scope to ensure test isolation - each test gets fresh repositories.
    The lookup repository is APP-scoped like the registry it feeds, seeded
    with the statuses and types the migrations seed.
    """

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_lookup_repository(self) -> LookupRepository:
        """Provide in-memory lookup repository."""
        return InMemoryLookupRepository()

    @provide(scope=Scope.REQUEST)
    def get_user_repository(self) -> UserRepository:
        """Provide in-memory user repository."""
        return InMemoryUserRepository()

    @provide(scope=Scope.REQUEST)
    def get_post_repository(self) -> PostRepository:
        """Provide in-memory post repository."""
        return InMemoryPostRepository()

    @provide(scope=Scope.REQUEST)
    def get_post_info_repository(self) -> PostInfoRepository:
        """Provide in-memory post info repository."""
        return InMemoryPostInfoRepository()

    @provide(scope=Scope.REQUEST)
    def get_comment_repository(self) -> CommentRepository:
        """Provide in-memory comment repository."""
        return InMemoryCommentRepository()

    @provide(scope=Scope.REQUEST)
    def get_tag_repository(self) -> TagRepository:
        """Provide in-memory tag repository."""
        return InMemoryTagRepository()
