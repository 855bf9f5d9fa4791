"""Base model for all domain entities."""

from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """Base class for persisted domain snapshots.

    Snapshots are immutable; changes are staged elsewhere and merged into a
    fresh copy on save.
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
    )
