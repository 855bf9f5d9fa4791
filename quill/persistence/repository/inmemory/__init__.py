"""In-memory repository implementations for testing."""

from .comment import InMemoryCommentRepository
from .info import InMemoryPostInfoRepository
from .lookup import InMemoryLookupRepository
from .post import InMemoryPostRepository
from .tag import InMemoryTagRepository
from .user import InMemoryUserRepository

__all__ = [
    "InMemoryCommentRepository",
    "InMemoryLookupRepository",
    "InMemoryPostInfoRepository",
    "InMemoryPostRepository",
    "InMemoryTagRepository",
    "InMemoryUserRepository",
]
