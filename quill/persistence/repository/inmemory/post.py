"""In-memory post repository for testing."""

import itertools
from typing import Optional

from quill.domain.error import ConflictError, PersistenceError
from quill.domain.model.post import Post
from quill.domain.repository.post import PostRepository
from quill.domain.value import PostId, Slug


class InMemoryPostRepository(PostRepository):
    """In-memory implementation of PostRepository for testing.

    Enforces slug uniqueness the way the unique index does, raising
    ConflictError on a duplicate.
    """

    def __init__(self) -> None:
        self._posts: dict[PostId, Post] = {}
        self._ids = itertools.count(1)

    def _holder(self, slug: str) -> Optional[Post]:
        for post in self._posts.values():
            if post.slug == slug:
                return post
        return None

    async def find_by_id(self, post_id: PostId) -> Optional[Post]:
        """Find a post by ID."""
        return self._posts.get(post_id)

    async def find_by_slug(self, slug: Slug) -> Optional[Post]:
        """Find a post by slug (soft-deleted posts included)."""
        return self._holder(str(slug))

    async def slug_exists(self, slug: Slug) -> bool:
        """Check if a slug exists (globally - includes deleted posts)."""
        return self._holder(str(slug)) is not None

    async def insert(self, post: Post) -> PostId:
        """Insert a post and assign the next id."""
        if self._holder(post.slug) is not None:
            raise ConflictError(post.slug)
        post_id = PostId(next(self._ids))
        self._posts[post_id] = post.model_copy(update={"id": post_id})
        return post_id

    async def update(self, post: Post, key_slug: str) -> None:
        """Overwrite the post currently holding ``key_slug``."""
        current = self._holder(key_slug)
        if current is None or current.id is None:
            raise PersistenceError(
                f"No post row holds slug {key_slug!r}", stage="post", post_id=post.id
            )
        holder = self._holder(post.slug)
        if holder is not None and holder.id != current.id:
            raise ConflictError(post.slug)
        self._posts[current.id] = post.model_copy(update={"id": current.id})

    async def delete(self, post_id: PostId) -> None:
        """Delete a post (hard delete)."""
        if self._posts.pop(post_id, None) is None:
            raise PersistenceError(
                f"Post {post_id} not found", stage="post", post_id=post_id
            )
