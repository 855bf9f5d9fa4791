"""Post aggregate.

A post is held as three parts:
- ``Post``: the immutable snapshot of the persisted columns
- ``PostChangeset``: field values staged by setters, not yet saved
- ``PostRecord``: the aggregate tying the two together with the staged
  tag list, the info sidecar and lazily loaded collaborators
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional, Sequence

from dateutil import parser as date_parser
from pydantic import Field, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError

from quill.domain.error import ValidationError
from quill.domain.model.comment import Comment
from quill.domain.model.common import DomainModel
from quill.domain.model.user import User
from quill.domain.value import PostId, UserId, tokenize_tags

if TYPE_CHECKING:
    from quill.domain.service.post_info import PostInfo


def _now() -> datetime:
    return datetime.now().replace(microsecond=0)


class Post(DomainModel):
    """Persisted snapshot of a post row."""

    id: Optional[PostId] = None
    slug: str = ""
    title: str = ""
    guid: str = ""
    content: str = ""
    cached_content: str = ""
    user_id: UserId = UserId(0)
    status: int = 0
    content_type: int = 0
    pubdate: datetime = Field(default_factory=_now)
    updated: datetime = Field(default_factory=_now)

    @field_validator("pubdate", "updated")
    @classmethod
    def truncate_to_seconds(cls, v: datetime) -> datetime:
        """Timestamps are stored with second precision."""
        return v.replace(microsecond=0)


# Columns a caller may stage; the id belongs to the store.
EDITABLE_FIELDS = frozenset(Post.model_fields) - {"id"}

_FIELD_ADAPTERS = {
    name: TypeAdapter(info.annotation)
    for name, info in Post.model_fields.items()
    if name in EDITABLE_FIELDS
}


def parse_pubdate(value: datetime | str) -> datetime:
    """Normalize any parseable date/time text to a canonical timestamp.

    Args:
        value: A datetime, or free-form text such as '2024-01-02 10:00'
            or 'Jan 2 2024 10am'

    Returns:
        Timestamp truncated to whole seconds

    Raises:
        ValidationError: If the text cannot be parsed
    """
    if isinstance(value, datetime):
        return value.replace(microsecond=0)
    try:
        parsed = date_parser.parse(str(value))
    except (ValueError, OverflowError) as e:
        raise ValidationError(f"Unparseable pubdate: {value!r}") from e
    if parsed.tzinfo is not None:
        # Stored timestamps are naive local time
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed.replace(microsecond=0)


class PostChangeset:
    """Pending field changes for a post, kept apart from the snapshot."""

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def set(self, field: str, value: Any) -> None:
        if field not in EDITABLE_FIELDS:
            raise ValidationError(f"Unknown or read-only post field: {field}")
        try:
            value = _FIELD_ADAPTERS[field].validate_python(value)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid value for post field {field}: {value!r}") from e
        self._values[field] = value

    def get(self, field: str, default: Any = None) -> Any:
        return self._values.get(field, default)

    def has(self, field: str) -> bool:
        return field in self._values

    def discard(self, field: str) -> None:
        self._values.pop(field, None)

    def clear(self) -> None:
        self._values.clear()

    def changes(self) -> dict[str, Any]:
        """All staged values, in staging order."""
        return dict(self._values)

    def differences(self, post: Post) -> dict[str, Any]:
        """Staged values that differ from the persisted snapshot."""
        return {
            field: value
            for field, value in self._values.items()
            if getattr(post, field) != value
        }

    def apply(self, post: Post, **extra: Any) -> Post:
        """Merge staged values (and extras such as the new id) into a new snapshot.

        The merged snapshot is validated, so a bad staged value fails here
        rather than after the write.
        """
        return Post.model_validate({**post.model_dump(), **self._values, **extra})

    def __bool__(self) -> bool:
        return bool(self._values)

    def __repr__(self) -> str:
        return f"PostChangeset({self._values!r})"


class PostRecord:
    """Post aggregate: snapshot, changeset, tags and info sidecar.

    Reads go through the changeset first so callers see their own staged
    edits. Lifecycle operations live on PostService, which owns the store
    collaborators.
    """

    def __init__(
        self,
        post: Post,
        info: "PostInfo",
        tags: Optional[list[str]] = None,
    ) -> None:
        self.post = post
        self.info = info
        self.changes = PostChangeset()
        # None means "not loaded yet"; an empty list is a real empty tag set.
        self.tags: Optional[list[str]] = tags
        self.comments: Optional[list[Comment]] = None
        self.author: Optional[User] = None
        self.removed = False

    @property
    def id(self) -> Optional[PostId]:
        return self.post.id

    @property
    def is_new(self) -> bool:
        return self.post.id is None

    def value(self, field: str) -> Any:
        """Staged value for a field, falling back to the persisted one."""
        if self.changes.has(field):
            return self.changes.get(field)
        return getattr(self.post, field)

    @property
    def slug(self) -> str:
        return self.value("slug")

    @property
    def title(self) -> str:
        return self.value("title")

    @property
    def guid(self) -> str:
        return self.value("guid")

    @property
    def status(self) -> int:
        return self.value("status")

    @property
    def content_type(self) -> int:
        return self.value("content_type")

    @property
    def user_id(self) -> UserId:
        return self.value("user_id")

    @property
    def pubdate(self) -> datetime:
        return self.value("pubdate")

    def set_field(self, field: str, value: Any) -> None:
        """Stage a plain column value."""
        if field == "pubdate":
            value = parse_pubdate(value)
        self.changes.set(field, value)

    def set_pubdate(self, value: datetime | str) -> datetime:
        pubdate = parse_pubdate(value)
        self.changes.set("pubdate", pubdate)
        return pubdate

    def set_tags(self, value: str | Sequence[str]) -> list[str]:
        """Stage a new tag set, tokenizing free-form text."""
        self.tags = tokenize_tags(value)
        return self.tags

    def __repr__(self) -> str:
        return f"PostRecord(id={self.id!r}, slug={self.slug!r})"
