"""Domain value objects for Quill.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

import re
from enum import Enum

from pydantic import field_validator

from quill.domain.value.common import RootValueObject

SLUG_SEPARATOR = "-"


class PostState(str, Enum):
    """Lifecycle state of a post record."""

    NEW = "new"  # No id yet
    PERSISTED = "persisted"
    SOFT_DELETED = "soft_deleted"  # Status is 'deleted', row intact
    HARD_DELETED = "hard_deleted"  # Row and dependents removed


class PostProperty(str, Enum):
    """Computed, read-through properties of a post.

    Each value is passed through the 'post_<name>' filter chain before it
    is handed to the caller.
    """

    PERMALINK = "permalink"
    TAGS = "tags"
    COMMENTS = "comments"
    COMMENT_COUNT = "comment_count"
    AUTHOR = "author"
    INFO = "info"

    @property
    def filter_name(self) -> str:
        """Name of the filter chain applied to this property."""
        return f"post_{self.value}"


class Slug(RootValueObject[str]):
    """URL-safe slug for posts.

    Must be lowercase alphanumerics joined by single hyphens.
    Examples: 'my-first-post', 'my-first-post-1'
    """

    @field_validator("root")
    @classmethod
    def validate_slug_format(cls, v: str) -> str:
        """Validate slug format."""
        if not re.match(r"^[a-z0-9]+(?:-[a-z0-9]+)*$", v):
            raise ValueError(
                "Slug must be lowercase alphanumeric with hyphens, "
                "no leading/trailing hyphens or consecutive hyphens"
            )
        if len(v) > 255:
            raise ValueError("Slug must be 1-255 characters")
        return v


def slugify(text: str, max_length: int = 255) -> str:
    """Convert text to URL-safe slug format.

    - Converts to lowercase
    - Replaces every run of non-alphanumeric chars with a single hyphen
    - Strips leading/trailing hyphens
    - Truncates to ``max_length`` without leaving a trailing hyphen

    Args:
        text: Text to slugify
        max_length: Maximum slug length

    Returns:
        URL-safe slug string (may be empty if text has no valid chars)
    """
    slug = re.sub(r"[^a-z0-9]+", SLUG_SEPARATOR, text.lower())
    return slug.strip(SLUG_SEPARATOR)[:max_length].rstrip(SLUG_SEPARATOR)
