"""Domain value objects for Quill."""

from quill.domain.value.identifiers import CommentId, PostId, TagId, UserId
from quill.domain.value.tags import join_tags, tokenize_tags
from quill.domain.value.types import (
    SLUG_SEPARATOR,
    PostProperty,
    PostState,
    Slug,
    slugify,
)

__all__ = [
    # Identifiers
    "PostId",
    "TagId",
    "UserId",
    "CommentId",
    # Types
    "Slug",
    "SLUG_SEPARATOR",
    "slugify",
    "PostState",
    "PostProperty",
    # Tags
    "tokenize_tags",
    "join_tags",
]
