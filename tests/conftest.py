"""Test configuration and fixtures."""

from datetime import datetime

from quill.domain.model import Comment
from quill.domain.value import CommentId, PostId


def make_comment(comment_id: int, post_id: PostId, content: str = "Nice post") -> Comment:
    """Helper to build a comment attached to a post.

    Args:
        comment_id: Comment id
        post_id: Owning post id
        content: Comment body

    Returns:
        Comment domain model
    """
    return Comment(
        id=CommentId(comment_id),
        post_id=post_id,
        name="reader",
        content=content,
        date=datetime(2024, 1, 1, 12, 0, comment_id % 60),
    )
