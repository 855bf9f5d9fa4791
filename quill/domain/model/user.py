"""User entity, as seen by posts (the author lookup)."""

from typing import Optional

from pydantic import Field

from quill.domain.model.common import DomainModel
from quill.domain.value import UserId


class User(DomainModel):
    """Author of posts."""

    id: UserId
    username: str = Field(min_length=1, max_length=255)
    email: Optional[str] = None
