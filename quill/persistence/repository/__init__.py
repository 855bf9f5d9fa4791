"""PostgreSQL repository implementations."""

from quill.persistence.repository.comment import PostgresCommentRepository
from quill.persistence.repository.info import PostgresPostInfoRepository
from quill.persistence.repository.lookup import PostgresLookupRepository
from quill.persistence.repository.post import PostgresPostRepository
from quill.persistence.repository.tag import PostgresTagRepository
from quill.persistence.repository.user import PostgresUserRepository

__all__ = [
    "PostgresCommentRepository",
    "PostgresLookupRepository",
    "PostgresPostInfoRepository",
    "PostgresPostRepository",
    "PostgresTagRepository",
    "PostgresUserRepository",
]
