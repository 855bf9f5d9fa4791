"""Post info sidecar.

Holds arbitrary key/value attributes of one post outside the posts table.
Writes are deferred: ``set``/``unset`` only stage changes, ``commit`` writes
them. The object is safe to build before the post has an id; values set on
a new post are committed once insert has assigned one.

Usage:
    info = PostInfo(info_repository, post_id)
    await info.load()
    info.set("comments_disabled", True)
    if info.has("legacy_id"):
        info.unset("legacy_id")
    await info.commit()
"""

from typing import Any, Iterator, Optional

import logfire

from quill.domain.error import ValidationError
from quill.domain.repository import PostInfoRepository
from quill.domain.value import PostId


class PostInfo:
    """Deferred-write key/value attributes of one post."""

    def __init__(
        self, repository: PostInfoRepository, owner_id: Optional[PostId] = None
    ) -> None:
        self.repository = repository
        self.owner_id = owner_id
        self.loaded = False
        self._values: dict[str, Any] = {}
        self._changed: dict[str, Any] = {}
        self._removed: set[str] = set()

    async def load(self, owner_id: Optional[PostId] = None) -> "PostInfo":
        """Load stored values; staged changes stay on top of them."""
        if owner_id is not None:
            self.owner_id = owner_id
        if self.owner_id is None:
            self.loaded = True
            return self
        stored = await self.repository.load(self.owner_id)
        stored.update(self._changed)
        for key in self._removed:
            stored.pop(key, None)
        self._values = stored
        self.loaded = True
        return self

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value
        self._changed[key] = value
        self._removed.discard(key)

    def unset(self, key: str) -> None:
        self._values.pop(key, None)
        self._changed.pop(key, None)
        self._removed.add(key)

    def has(self, key: str) -> bool:
        return key in self._values

    def __contains__(self, key: str) -> bool:
        return self.has(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def items(self) -> list[tuple[str, Any]]:
        return list(self._values.items())

    @property
    def is_dirty(self) -> bool:
        return bool(self._changed or self._removed)

    async def commit(self, owner_id: Optional[PostId] = None) -> None:
        """Write staged changes under the owning post id.

        Args:
            owner_id: Post id; required if not known at construction

        Raises:
            ValidationError: If no owner id is known yet
            PersistenceError: If the store write fails
        """
        if owner_id is not None:
            self.owner_id = owner_id
        if self.owner_id is None:
            raise ValidationError("Post info cannot be committed before the post has an id")
        if not self.is_dirty:
            return
        with logfire.span(
            "post_info.commit",
            post_id=self.owner_id,
            changed=sorted(self._changed),
            removed=sorted(self._removed),
        ):
            await self.repository.save(
                self.owner_id, dict(self._changed), set(self._removed)
            )
            self._changed.clear()
            self._removed.clear()
