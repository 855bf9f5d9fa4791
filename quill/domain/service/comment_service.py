"""Comment domain service.

Posts read their comments through this service and cascade deletion
through it on hard delete.
"""

import logfire

from quill.domain.model.comment import Comment
from quill.domain.repository import CommentRepository
from quill.domain.value import PostId

from .base import Service


class CommentService(Service):
    """Domain service for comment operations."""

    def __init__(self, comment_repository: CommentRepository) -> None:
        """Initialize comment service.

        Args:
            comment_repository: Comment repository
        """
        self.comment_repository = comment_repository

    async def get_post_comments(self, post_id: PostId) -> list[Comment]:
        """Get all comments of a post.

        Args:
            post_id: Post ID

        Returns:
            Comments, oldest first
        """
        with logfire.span("comment_service.get_post_comments", post_id=post_id):
            comments = await self.comment_repository.find_by_post(post_id)
            logfire.info("Comments retrieved", post_id=post_id, count=len(comments))
            return comments

    async def count_post_comments(self, post_id: PostId) -> int:
        """Count the comments of a post."""
        return await self.comment_repository.count_by_post(post_id)

    async def delete_post_comments(self, post_id: PostId) -> int:
        """Delete every comment of a post.

        Args:
            post_id: Post ID

        Returns:
            Number of comments removed

        Raises:
            PersistenceError: If the delete fails
        """
        with logfire.span("comment_service.delete_post_comments", post_id=post_id):
            removed = await self.comment_repository.delete_by_post(post_id)
            logfire.info("Post comments deleted", post_id=post_id, removed=removed)
            return removed
