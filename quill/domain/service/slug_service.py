"""Slug allocation."""

from typing import AbstractSet

import logfire

from quill.config import SlugSettings
from quill.domain.repository import PostRepository
from quill.domain.value import SLUG_SEPARATOR, Slug, slugify

from .base import Service


class SlugAllocator(Service):
    """Allocates post slugs that are unique at the moment of allocation.

    Uniqueness is checked with one exact-match probe per candidate
    (``base``, ``base-1``, ``base-2``, ...). The probe and the later insert
    can still race with another writer; the unique index on posts.slug is
    the backstop and PostService retries on a ConflictError.
    """

    def __init__(self, post_repository: PostRepository, settings: SlugSettings) -> None:
        """Initialize slug allocator.

        Args:
            post_repository: Post repository (for existence probes)
            settings: Slug settings
        """
        self.post_repository = post_repository
        self.settings = settings

    def derive(self, *sources: str) -> str:
        """Slugify the first source that yields a non-empty slug.

        Falls back to the configured placeholder base.
        """
        for source in sources:
            candidate = slugify(source or "", self.settings.max_length)
            if candidate:
                return candidate
        return slugify(self.settings.fallback, self.settings.max_length)

    async def allocate(
        self,
        base_text: str,
        current_slug: str = "",
        persisted_slug: str = "",
        taken: AbstractSet[str] = frozenset(),
    ) -> Slug:
        """Allocate a unique slug.

        Args:
            base_text: Text to derive from when no explicit slug is given
                (normally the title)
            current_slug: Explicitly requested slug, or the record's slug
            persisted_slug: Slug the record holds in the store, if any
            taken: Candidates to treat as taken without probing (slugs lost
                to a concurrent writer)

        Returns:
            The slug to stage on the record
        """
        current_slug = (current_slug or "").lower()
        persisted_slug = (persisted_slug or "").lower()

        # Unrelated edits keep the slug the record already owns
        if current_slug and current_slug == persisted_slug and current_slug not in taken:
            return Slug(current_slug)

        with logfire.span(
            "slug_allocator.allocate",
            base_text=base_text,
            current_slug=current_slug,
        ):
            base = self.derive(current_slug, base_text)
            candidate = base
            counter = 0
            while candidate in taken or await self.post_repository.slug_exists(
                Slug(candidate)
            ):
                counter += 1
                suffix = f"{SLUG_SEPARATOR}{counter}"
                # Keep within max length with the suffix attached
                trimmed = base[: self.settings.max_length - len(suffix)].rstrip(
                    SLUG_SEPARATOR
                )
                candidate = trimmed + suffix
                logfire.debug(
                    "Slug collision, trying with suffix",
                    base_slug=base,
                    attempt=candidate,
                    counter=counter,
                )

            logfire.info(
                "Allocated slug",
                slug=candidate,
                had_collision=counter > 0,
            )
            return Slug(candidate)
