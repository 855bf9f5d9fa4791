"""Lookup table repository interface (post statuses and post types)."""

from abc import ABC, abstractmethod


class LookupRepository(ABC):
    """Read access to the poststatus and posttype lookup tables."""

    @abstractmethod
    async def list_statuses(self) -> list[tuple[str, int]]:
        """All (name, id) status pairs ordered by id ascending."""
        pass

    @abstractmethod
    async def list_types(self) -> list[tuple[str, int]]:
        """All (name, id) post type pairs ordered by id ascending."""
        pass
