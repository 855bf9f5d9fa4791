"""In-memory lookup table repository for testing."""

from quill.domain.repository.lookup import LookupRepository

# Same rows the initial migration seeds
DEFAULT_STATUSES = [("draft", 1), ("published", 2), ("scheduled", 3), ("deleted", 4)]
DEFAULT_TYPES = [("entry", 1), ("page", 2)]


class InMemoryLookupRepository(LookupRepository):
    """In-memory implementation of LookupRepository for testing."""

    def __init__(
        self,
        statuses: list[tuple[str, int]] | None = None,
        types: list[tuple[str, int]] | None = None,
    ) -> None:
        self.statuses = list(DEFAULT_STATUSES if statuses is None else statuses)
        self.types = list(DEFAULT_TYPES if types is None else types)
        self.reads = 0

    async def list_statuses(self) -> list[tuple[str, int]]:
        self.reads += 1
        return sorted(self.statuses, key=lambda row: row[1])

    async def list_types(self) -> list[tuple[str, int]]:
        self.reads += 1
        return sorted(self.types, key=lambda row: row[1])
