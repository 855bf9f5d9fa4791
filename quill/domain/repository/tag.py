"""Tag repository interface."""

from abc import ABC, abstractmethod

from quill.domain.value import PostId


class TagRepository(ABC):
    """Repository for tags and their post associations."""

    @abstractmethod
    async def find_by_post(self, post_id: PostId) -> list[str]:
        """Tag texts associated with a post, in association order.

        Args:
            post_id: Post identifier

        Returns:
            List of tag texts (empty if the post has no tags)
        """
        pass

    @abstractmethod
    async def replace_for_post(self, post_id: PostId, tags: list[str]) -> None:
        """Replace every association of a post with the given tags.

        Stale associations are removed; missing tags are created.

        Args:
            post_id: Post identifier
            tags: Full new tag set (empty removes all associations)

        Raises:
            PersistenceError: If the store write fails
        """
        pass
