"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict

from quill.domain.model import Comment, Post, User
from quill.domain.value import CommentId, PostId, UserId


def row_to_post(row: Dict[str, Any]) -> Post:
    """Convert database row to Post domain model.

    Args:
        row: Database row as dict

    Returns:
        Post domain model
    """
    return Post(
        id=PostId(row["id"]),
        slug=row["slug"],
        guid=row["guid"],
        title=row.get("title") or "",
        content=row.get("content") or "",
        cached_content=row.get("cached_content") or "",
        user_id=UserId(row.get("user_id") or 0),
        status=row["status"],
        content_type=row["content_type"],
        pubdate=row["pubdate"],
        updated=row["updated"],
    )


def post_to_dict(post: Post) -> Dict[str, Any]:
    """Convert Post domain model to database dict.

    The id is left out; the store assigns it on insert and it never changes.

    Args:
        post: Post domain model

    Returns:
        Dict suitable for database insertion/update
    """
    return post.model_dump(exclude={"id"})


def row_to_comment(row: Dict[str, Any]) -> Comment:
    """Convert database row to Comment domain model."""
    return Comment(
        id=CommentId(row["id"]),
        post_id=PostId(row["post_id"]),
        name=row.get("name") or "",
        content=row.get("content") or "",
        date=row["date"],
    )


def comment_to_dict(comment: Comment) -> Dict[str, Any]:
    """Convert Comment domain model to database dict."""
    return comment.model_dump()


def row_to_user(row: Dict[str, Any]) -> User:
    """Convert database row to User domain model."""
    return User(
        id=UserId(row["id"]),
        username=row["username"],
        email=row.get("email"),
    )


def user_to_dict(user: User) -> Dict[str, Any]:
    """Convert User domain model to database dict."""
    return user.model_dump()
