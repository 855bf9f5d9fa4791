"""Domain model entities for Quill."""

from quill.domain.model.comment import Comment
from quill.domain.model.post import Post, PostChangeset, PostRecord
from quill.domain.model.tag import Tag
from quill.domain.model.user import User

__all__ = [
    "Post",
    "PostChangeset",
    "PostRecord",
    "Comment",
    "Tag",
    "User",
]
