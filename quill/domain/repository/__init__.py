"""Repository interfaces for the Quill domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from quill.domain.repository.comment import CommentRepository
from quill.domain.repository.info import PostInfoRepository
from quill.domain.repository.lookup import LookupRepository
from quill.domain.repository.post import PostRepository
from quill.domain.repository.tag import TagRepository
from quill.domain.repository.user import UserRepository

__all__ = [
    "PostRepository",
    "TagRepository",
    "LookupRepository",
    "PostInfoRepository",
    "CommentRepository",
    "UserRepository",
]
