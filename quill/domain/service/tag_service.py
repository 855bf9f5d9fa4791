"""Tag domain service."""

import logfire

from quill.domain.repository.tag import TagRepository
from quill.domain.value import PostId

from .base import Service


class TagService(Service):
    """Domain service for tags and post/tag associations."""

    def __init__(self, tag_repository: TagRepository) -> None:
        """Initialize tag service.

        Args:
            tag_repository: Tag repository
        """
        self.tag_repository = tag_repository

    async def get_post_tags(self, post_id: PostId) -> list[str]:
        """Get the tag texts associated with a post.

        Args:
            post_id: Post ID

        Returns:
            Tag texts in association order
        """
        with logfire.span("tag_service.get_post_tags", post_id=post_id):
            tags = await self.tag_repository.find_by_post(post_id)
            logfire.debug("Post tags loaded", post_id=post_id, count=len(tags))
            return tags

    async def replace_post_tags(self, post_id: PostId, tags: list[str]) -> None:
        """Make ``tags`` the complete tag set of a post.

        Duplicate tags are collapsed, keeping the first occurrence.

        Args:
            post_id: Post ID
            tags: New tag set

        Raises:
            PersistenceError: If the store write fails
        """
        unique = list(dict.fromkeys(tags))
        with logfire.span(
            "tag_service.replace_post_tags", post_id=post_id, tags=unique
        ):
            await self.tag_repository.replace_for_post(post_id, unique)
            logfire.info("Post tags replaced", post_id=post_id, count=len(unique))

