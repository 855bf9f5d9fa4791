"""Post info repository interface.

Post info is a free-form key/value sidecar for a post, stored outside the
posts table.
"""

from abc import ABC, abstractmethod
from typing import Any

from quill.domain.value import PostId


class PostInfoRepository(ABC):
    """Repository for the postinfo table."""

    @abstractmethod
    async def load(self, post_id: PostId) -> dict[str, Any]:
        """Load every info value stored for a post.

        Args:
            post_id: Owning post

        Returns:
            Mapping of info name to value
        """
        pass

    @abstractmethod
    async def save(
        self, post_id: PostId, values: dict[str, Any], removed: set[str]
    ) -> None:
        """Upsert changed values and delete removed names for a post.

        Args:
            post_id: Owning post
            values: Names to insert or overwrite
            removed: Names to delete

        Raises:
            PersistenceError: If the store write fails
        """
        pass

    @abstractmethod
    async def delete_for_post(self, post_id: PostId) -> None:
        """Delete every info value of a post."""
        pass
