"""Post repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from quill.domain.model.post import Post
from quill.domain.value import PostId, Slug


class PostRepository(ABC):
    """Repository for the posts table.

    Defines the contract for post persistence operations.
    Implementations live in the persistence layer.
    """

    @abstractmethod
    async def find_by_id(self, post_id: PostId) -> Optional[Post]:
        """Find a post by ID.

        Args:
            post_id: The post's unique identifier

        Returns:
            The post if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_slug(self, slug: Slug) -> Optional[Post]:
        """Find a post by slug.

        Args:
            slug: The post slug

        Returns:
            The post if found, None otherwise
        """
        pass

    @abstractmethod
    async def slug_exists(self, slug: Slug) -> bool:
        """Check whether any post (in any status) holds exactly this slug.

        Args:
            slug: Candidate slug

        Returns:
            True if the slug is taken
        """
        pass

    @abstractmethod
    async def insert(self, post: Post) -> PostId:
        """Insert a new post row.

        Args:
            post: Snapshot to write (its id is ignored)

        Returns:
            The id assigned by the store

        Raises:
            ConflictError: If another row already holds the slug
            PersistenceError: If the write fails for any other reason
        """
        pass

    @abstractmethod
    async def update(self, post: Post, key_slug: str) -> None:
        """Overwrite the row currently holding ``key_slug``.

        Args:
            post: Snapshot with the new column values
            key_slug: Slug of the row as persisted before this update

        Raises:
            ConflictError: If the new slug is held by another row
            PersistenceError: If no row matched or the write failed
        """
        pass

    @abstractmethod
    async def delete(self, post_id: PostId) -> None:
        """Delete a post row (hard delete).

        Args:
            post_id: The post ID to delete

        Raises:
            PersistenceError: If no row matched or the delete failed
        """
        pass
