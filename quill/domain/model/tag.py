"""Tag entity for categorizing posts."""

from pydantic import Field

from quill.domain.model.common import DomainModel
from quill.domain.value import TagId


class Tag(DomainModel):
    """Tag entity.

    Tags are free-form text attached to posts through the tag2post
    association table. ``tag_text`` is unique; ``tag_slug`` is its URL form.
    """

    id: TagId
    tag_text: str = Field(min_length=1, max_length=255)
    tag_slug: str = Field(max_length=255)
