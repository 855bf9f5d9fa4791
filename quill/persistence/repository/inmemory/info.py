"""In-memory post info repository for testing."""

from copy import deepcopy
from typing import Any

from quill.domain.repository.info import PostInfoRepository
from quill.domain.value import PostId


class InMemoryPostInfoRepository(PostInfoRepository):
    """In-memory implementation of PostInfoRepository for testing."""

    def __init__(self) -> None:
        self._rows: dict[PostId, dict[str, Any]] = {}

    async def load(self, post_id: PostId) -> dict[str, Any]:
        return deepcopy(self._rows.get(post_id, {}))

    async def save(
        self, post_id: PostId, values: dict[str, Any], removed: set[str]
    ) -> None:
        rows = self._rows.setdefault(post_id, {})
        for name in removed:
            rows.pop(name, None)
        rows.update(deepcopy(values))

    async def delete_for_post(self, post_id: PostId) -> None:
        self._rows.pop(post_id, None)
