"""Post status and post type registry."""

import logfire

from quill.domain.error import NotFoundError
from quill.domain.repository import LookupRepository

from .base import Service

ANY = "any"


class TypeStatusRegistry(Service):
    """Cache of post status and post type codes, keyed by lower-cased name.

    Loaded from the lookup tables on first access and kept until
    ``refresh()``. Both maps carry the pseudo-entry ``"any" -> 0``, which
    does not exist in the tables. One instance is shared by the whole
    process; concurrent refreshes simply overwrite each other with the same
    table contents.
    """

    def __init__(self, lookup_repository: LookupRepository) -> None:
        """Initialize registry.

        Args:
            lookup_repository: Read access to the lookup tables
        """
        self.lookup_repository = lookup_repository
        self._statuses: dict[str, int] = {}
        self._types: dict[str, int] = {}

    @staticmethod
    def _build(rows: list[tuple[str, int]]) -> dict[str, int]:
        mapping = {ANY: 0}
        for name, code in rows:
            mapping[name.lower()] = code
        return mapping

    async def refresh(self) -> None:
        """Reload both maps from the lookup tables."""
        with logfire.span("registry.refresh"):
            self._statuses = self._build(await self.lookup_repository.list_statuses())
            self._types = self._build(await self.lookup_repository.list_types())
            logfire.info(
                "Post statuses and types loaded",
                statuses=len(self._statuses),
                types=len(self._types),
            )

    async def _ensure_loaded(self) -> None:
        if not self._statuses or not self._types:
            await self.refresh()

    async def statuses(self, refresh: bool = False) -> dict[str, int]:
        """Status name -> code map (a copy)."""
        if refresh:
            await self.refresh()
        await self._ensure_loaded()
        return dict(self._statuses)

    async def types(self, refresh: bool = False) -> dict[str, int]:
        """Post type name -> code map (a copy)."""
        if refresh:
            await self.refresh()
        await self._ensure_loaded()
        return dict(self._types)

    async def lookup_status(self, name: str) -> int:
        """Code of a status name, case-insensitively.

        Raises:
            NotFoundError: If no status has this name
        """
        await self._ensure_loaded()
        try:
            return self._statuses[name.lower()]
        except KeyError:
            raise NotFoundError("Post status", name) from None

    async def lookup_type(self, name: str) -> int:
        """Code of a post type name, case-insensitively.

        Raises:
            NotFoundError: If no post type has this name
        """
        await self._ensure_loaded()
        try:
            return self._types[name.lower()]
        except KeyError:
            raise NotFoundError("Post type", name) from None

    async def status_name(self, code: int) -> str:
        """Name of a status code.

        Raises:
            NotFoundError: If no status has this code
        """
        await self._ensure_loaded()
        for name, value in self._statuses.items():
            if value == code:
                return name
        raise NotFoundError("Post status", str(code))

    async def resolve_status(self, value: int | str) -> int:
        """Resolve a status given as a code or a name.

        A name resolves to its own code. Numeric strings are treated as codes.

        Raises:
            NotFoundError: If the code or name is unknown
        """
        return self._resolve(value, await self.statuses(), "Post status")

    async def resolve_type(self, value: int | str) -> int:
        """Resolve a post type given as a code or a name.

        Raises:
            NotFoundError: If the code or name is unknown
        """
        return self._resolve(value, await self.types(), "Post type")

    @staticmethod
    def _resolve(value: int | str, mapping: dict[str, int], resource: str) -> int:
        if isinstance(value, str) and value.strip().isdigit():
            value = int(value)
        if isinstance(value, int):
            if value in mapping.values():
                return value
            raise NotFoundError(resource, str(value))
        try:
            return mapping[value.lower()]
        except KeyError:
            raise NotFoundError(resource, value) from None
