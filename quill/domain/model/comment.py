"""Comment entity.

Comments are owned by the comments collaborator; posts only read them and
cascade their removal on hard delete.
"""

from datetime import datetime

from pydantic import Field

from quill.domain.model.common import DomainModel
from quill.domain.value import CommentId, PostId


class Comment(DomainModel):
    """Comment on a post."""

    id: CommentId
    post_id: PostId
    name: str = ""
    content: str = Field(default="", max_length=10000)
    date: datetime = Field(default_factory=datetime.now)
