"""In-memory implementation of Tag repository for testing."""

from quill.domain.model.tag import Tag
from quill.domain.repository.tag import TagRepository
from quill.domain.value import PostId, TagId, slugify


class InMemoryTagRepository(TagRepository):
    """In-memory implementation of TagRepository for testing."""

    def __init__(self) -> None:
        """Initialize empty repository."""
        self._tags: dict[TagId, Tag] = {}
        self._text_index: dict[str, TagId] = {}
        # (tag_id, post_id) association rows
        self.associations: list[tuple[TagId, PostId]] = []

    async def find_by_post(self, post_id: PostId) -> list[str]:
        """Tag texts of a post, in association order."""
        return [
            self._tags[tag_id].tag_text
            for tag_id, owner in self.associations
            if owner == post_id
        ]

    def _ensure_tag(self, tag_text: str) -> TagId:
        tag_id = self._text_index.get(tag_text)
        if tag_id is None:
            tag_id = TagId(len(self._tags) + 1)
            self._tags[tag_id] = Tag(
                id=tag_id, tag_text=tag_text, tag_slug=slugify(tag_text)
            )
            self._text_index[tag_text] = tag_id
        return tag_id

    async def replace_for_post(self, post_id: PostId, tags: list[str]) -> None:
        """Replace every association of a post with ``tags``."""
        self.associations = [row for row in self.associations if row[1] != post_id]
        for tag_text in tags:
            row = (self._ensure_tag(tag_text), post_id)
            if row not in self.associations:
                self.associations.append(row)
