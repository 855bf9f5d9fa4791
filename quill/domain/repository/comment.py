"""Comment repository interface.

Only the slice of the comments collaborator that posts depend on.
"""

from abc import ABC, abstractmethod

from quill.domain.model.comment import Comment
from quill.domain.value import PostId


class CommentRepository(ABC):
    """Repository for comments on posts."""

    @abstractmethod
    async def find_by_post(self, post_id: PostId) -> list[Comment]:
        """Find all comments for a post, oldest first.

        Args:
            post_id: The post ID

        Returns:
            List of comments
        """
        pass

    @abstractmethod
    async def count_by_post(self, post_id: PostId) -> int:
        """Count comments on a post."""
        pass

    @abstractmethod
    async def delete_by_post(self, post_id: PostId) -> int:
        """Delete every comment of a post.

        Args:
            post_id: The post ID

        Returns:
            Number of comments removed

        Raises:
            PersistenceError: If the delete fails
        """
        pass

    @abstractmethod
    async def save(self, comment: Comment) -> Comment:
        """Save a comment."""
        pass
