"""Post lifecycle service.

Orchestrates a post record's save as a sequence of dependent sub-writes:
the main row, then the info sidecar and the tag associations. Lifecycle
notifications go through the HookDispatcher:

- ``post_insert`` after a new post is fully written
- ``update_post_<field>`` for each staged field that differs from the
  stored value, before the row is written (observers can still read the
  old value from ``record.post``)
- ``post_delete`` before a hard delete removes anything
"""

from datetime import datetime
from typing import Any, Awaitable, Callable, Optional, Sequence

import logfire

from quill.config import Settings
from quill.domain.error import (
    ConflictError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from quill.domain.model.comment import Comment
from quill.domain.model.post import Post, PostRecord
from quill.domain.model.user import User
from quill.domain.repository import PostInfoRepository, PostRepository
from quill.domain.value import PostId, PostProperty, PostState, Slug

from .base import Service
from .comment_service import CommentService
from .hooks import HookDispatcher
from .post_info import PostInfo
from .registry import TypeStatusRegistry
from .slug_service import SlugAllocator
from .tag_service import TagService
from .url import UrlBuilder
from .user_service import UserService

DEFAULT_STATUS = "draft"
DEFAULT_TYPE = "entry"
DELETED_STATUS = "deleted"
PUBLISHED_STATUSES = ("published", "publish")

# Written by some importers in place of a real guid
MALFORMED_GUID = "//?p="


def _now() -> datetime:
    return datetime.now().replace(microsecond=0)


class PostService(Service):
    """Domain service for the post record lifecycle."""

    def __init__(
        self,
        post_repository: PostRepository,
        info_repository: PostInfoRepository,
        tag_service: TagService,
        comment_service: CommentService,
        user_service: UserService,
        registry: TypeStatusRegistry,
        slug_allocator: SlugAllocator,
        hooks: HookDispatcher,
        url_builder: UrlBuilder,
        settings: Settings,
    ) -> None:
        """Initialize post service.

        Args:
            post_repository: Post repository
            info_repository: Post info sidecar repository
            tag_service: Tag service (tag associations)
            comment_service: Comment service (comment reads, cascade delete)
            user_service: User service (author lookup)
            registry: Status and type registry
            slug_allocator: Slug allocator
            hooks: Hook dispatcher
            url_builder: URL builder for permalinks
            settings: Application settings
        """
        self.post_repository = post_repository
        self.info_repository = info_repository
        self.tag_service = tag_service
        self.comment_service = comment_service
        self.user_service = user_service
        self.registry = registry
        self.slug_allocator = slug_allocator
        self.hooks = hooks
        self.url_builder = url_builder
        self.settings = settings

    # Construction and lookup

    async def new_record(self, **fields: Any) -> PostRecord:
        """Build a NEW record with default status and type, then stage ``fields``.

        Raises:
            ValidationError: If a field is unknown or a value is invalid
            NotFoundError: If a status or type name is unknown
        """
        record = PostRecord(Post(), PostInfo(self.info_repository), tags=[])
        await self.set_status(record, DEFAULT_STATUS)
        await self.set_content_type(record, DEFAULT_TYPE)
        for field, value in fields.items():
            await self.stage(record, field, value)
        return record

    async def create(self, fields: dict[str, Any]) -> PostRecord:
        """Build a new record from ``fields`` and insert it."""
        record = await self.new_record(**fields)
        await self.insert(record)
        return record

    async def get_by_id(self, post_id: PostId) -> Optional[PostRecord]:
        """Load a post record by id, with tags and info loaded.

        Returns:
            Record if found, None otherwise
        """
        with logfire.span("post_service.get_by_id", post_id=post_id):
            post = await self.post_repository.find_by_id(post_id)
            if post is None:
                logfire.warn("Post not found", post_id=post_id)
                return None
            return await self._load_record(post)

    async def get_by_slug(self, slug: Slug) -> Optional[PostRecord]:
        """Load a post record by slug, with tags and info loaded.

        Returns:
            Record if found, None otherwise
        """
        with logfire.span("post_service.get_by_slug", slug=str(slug)):
            post = await self.post_repository.find_by_slug(slug)
            if post is None:
                logfire.warn("Post not found by slug", slug=str(slug))
                return None
            return await self._load_record(post)

    async def _load_record(self, post: Post) -> PostRecord:
        if post.id is None:
            raise ValidationError("Stored post has no id")
        tags = await self.tag_service.get_post_tags(post.id)
        info = await PostInfo(self.info_repository, post.id).load()
        logfire.info("Post loaded", post_id=post.id, slug=post.slug)
        return PostRecord(post, info, tags=tags)

    async def state(self, record: PostRecord) -> PostState:
        """Lifecycle state of a record, judged by its stored status."""
        if record.removed:
            return PostState.HARD_DELETED
        if record.is_new:
            return PostState.NEW
        try:
            deleted = await self.registry.lookup_status(DELETED_STATUS)
        except NotFoundError:
            return PostState.PERSISTED
        if record.post.status == deleted:
            return PostState.SOFT_DELETED
        return PostState.PERSISTED

    # Setters

    async def stage(self, record: PostRecord, field: str, value: Any) -> None:
        """Stage one caller-supplied field, normalizing it on the way in.

        ``tags`` is tokenized, ``status`` and ``content_type`` accept a code
        or a name, ``pubdate`` accepts any parseable date text and ``info``
        takes a mapping of sidecar values.
        """
        if field == "tags":
            record.set_tags(value)
        elif field == "status":
            await self.set_status(record, value)
        elif field == "content_type":
            await self.set_content_type(record, value)
        elif field == "info":
            for key, item in dict(value).items():
                record.info.set(key, item)
        else:
            record.set_field(field, value)

    async def set_status(self, record: PostRecord, value: int | str) -> int:
        """Stage a status given as a code or a name."""
        code = await self.registry.resolve_status(value)
        record.changes.set("status", code)
        return code

    async def set_content_type(self, record: PostRecord, value: int | str) -> int:
        """Stage a post type given as a code or a name."""
        code = await self.registry.resolve_type(value)
        record.changes.set("content_type", code)
        return code

    def set_pubdate(self, record: PostRecord, value: datetime | str) -> datetime:
        return record.set_pubdate(value)

    def set_tags(self, record: PostRecord, value: str | Sequence[str]) -> list[str]:
        return record.set_tags(value)

    # Lifecycle

    async def insert(self, record: PostRecord) -> PostRecord:
        """Write a NEW record and everything staged on it.

        Raises:
            ValidationError: If the record already has an id
            PersistenceError: If a sub-write fails (stage names which one);
                on a 'post' or 'slug' failure the record stays NEW
        """
        if not record.is_new:
            raise ValidationError(f"Post {record.id} is already stored; use update")

        with logfire.span("post_service.insert", title=record.title):
            now = _now()
            requested_slug = record.slug
            guid = record.guid

            def build(slug: str) -> Post:
                return record.changes.apply(
                    record.post,
                    slug=slug,
                    guid=guid if self._guid_is_valid(guid) else self._make_guid(slug, now),
                    updated=now,
                )

            post, post_id = await self._write_row(
                record,
                requested_slug=requested_slug,
                persisted_slug="",
                build=build,
                write=self.post_repository.insert,
            )

            record.post = post.model_copy(update={"id": post_id})
            record.changes.clear()
            logfire.info("Post row inserted", post_id=post_id, slug=record.post.slug)

            await record.info.commit(post_id)
            await self.tag_service.replace_post_tags(post_id, record.tags or [])
            await self.hooks.notify("post_insert", record)
            return record

    async def update(self, record: PostRecord) -> PostRecord:
        """Write the staged changes of a stored record.

        ``updated`` is refreshed and the tag associations replaced even when
        nothing else is staged.

        Raises:
            ValidationError: If the record is NEW or hard-deleted
            PersistenceError: If a sub-write fails; on a 'post' or 'slug'
                failure the changeset is preserved
        """
        post_id = record.id
        if post_id is None:
            raise ValidationError("Post has no id yet; use insert")
        if record.removed:
            raise ValidationError(f"Post {post_id} has been deleted")

        with logfire.span("post_service.update", post_id=post_id):
            now = _now()
            # The guid is fixed once the post exists
            record.changes.discard("guid")
            persisted_slug = record.post.slug
            requested_slug = (
                record.changes.get("slug") if record.changes.has("slug") else persisted_slug
            )

            for field, value in record.changes.differences(record.post).items():
                await self.hooks.notify(f"update_post_{field}", record, value)

            def build(slug: str) -> Post:
                return record.changes.apply(record.post, slug=slug, updated=now)

            async def write(candidate: Post) -> PostId:
                await self.post_repository.update(candidate, key_slug=persisted_slug)
                return post_id

            post, _ = await self._write_row(
                record,
                requested_slug=requested_slug,
                persisted_slug=persisted_slug,
                build=build,
                write=write,
            )

            record.post = post
            record.changes.clear()
            logfire.info("Post row updated", post_id=post_id, slug=post.slug)

            if record.tags is None:
                record.tags = await self.tag_service.get_post_tags(post_id)
            await self.tag_service.replace_post_tags(post_id, record.tags)
            await record.info.commit(post_id)
            return record

    async def delete(self, record: PostRecord, hard: bool = False) -> None:
        """Delete a stored record.

        A soft delete sets the 'deleted' status and keeps the row. A hard
        delete removes comments, tag associations, info and then the row.

        Raises:
            ValidationError: If the record is NEW
            PersistenceError: If a stage of the delete fails
        """
        post_id = record.id
        if post_id is None:
            raise ValidationError("Post has no id yet; nothing to delete")
        if record.removed:
            return

        if not hard:
            with logfire.span("post_service.soft_delete", post_id=post_id):
                await self.set_status(record, DELETED_STATUS)
                await self.update(record)
                logfire.info("Post soft-deleted", post_id=post_id)
            return

        with logfire.span("post_service.hard_delete", post_id=post_id):
            await self.hooks.notify("post_delete", record)
            removed_comments = await self.comment_service.delete_post_comments(post_id)
            await self.tag_service.replace_post_tags(post_id, [])
            await self.info_repository.delete_for_post(post_id)
            try:
                await self.post_repository.delete(post_id)
            except PersistenceError as e:
                raise PersistenceError(
                    f"Post row delete failed after {removed_comments} comments "
                    f"were removed: {e}",
                    stage="post",
                    post_id=post_id,
                ) from e

            record.removed = True
            record.tags = []
            record.comments = []
            logfire.info(
                "Post hard-deleted", post_id=post_id, removed_comments=removed_comments
            )

    async def publish(self, record: PostRecord) -> PostRecord:
        """Set the published status and save the record."""
        code: int | None = None
        for name in PUBLISHED_STATUSES:
            try:
                code = await self.registry.lookup_status(name)
                break
            except NotFoundError:
                continue
        if code is None:
            raise NotFoundError("Post status", PUBLISHED_STATUSES[0])
        record.changes.set("status", code)
        if record.is_new:
            return await self.insert(record)
        return await self.update(record)

    async def _write_row(
        self,
        record: PostRecord,
        requested_slug: str,
        persisted_slug: str,
        build: Callable[[str], Post],
        write: Callable[[Post], Awaitable[PostId]],
    ) -> tuple[Post, PostId]:
        """Allocate a slug and write the main row, retrying lost slug races."""
        taken: set[str] = set()
        attempts = self.settings.slug.max_retries + 1
        for attempt in range(1, attempts + 1):
            slug = await self.slug_allocator.allocate(
                record.title, requested_slug, persisted_slug, taken
            )
            candidate = build(str(slug))
            try:
                post_id = await write(candidate)
            except ConflictError as e:
                logfire.warn(
                    "Slug taken by a concurrent writer, retrying",
                    slug=e.slug,
                    attempt=attempt,
                )
                taken.add(e.slug)
                continue
            return candidate, post_id
        raise PersistenceError(
            f"No unique slug after {attempts} attempts (tried {sorted(taken)})",
            stage="slug",
            post_id=record.id,
        )

    @staticmethod
    def _guid_is_valid(guid: str) -> bool:
        return bool(guid and guid.strip()) and guid != MALFORMED_GUID

    def _make_guid(self, slug: str, now: datetime) -> str:
        return f"tag:{self.settings.site.hostname},{now.year}:{slug}/{int(now.timestamp())}"

    # Computed properties

    async def get_property(self, record: PostRecord, prop: PostProperty) -> Any:
        """Load a computed property and pass it through its filter chain."""
        loaders = {
            PostProperty.PERMALINK: self._load_permalink,
            PostProperty.TAGS: self._load_tags,
            PostProperty.COMMENTS: self._load_comments,
            PostProperty.COMMENT_COUNT: self._load_comment_count,
            PostProperty.AUTHOR: self._load_author,
            PostProperty.INFO: self._load_info,
        }
        value = await loaders[prop](record)
        return await self.hooks.filter(prop.filter_name, value, record)

    async def permalink(self, record: PostRecord) -> str:
        return await self.get_property(record, PostProperty.PERMALINK)

    async def tags(self, record: PostRecord) -> list[str]:
        return await self.get_property(record, PostProperty.TAGS)

    async def comments(self, record: PostRecord) -> list[Comment]:
        return await self.get_property(record, PostProperty.COMMENTS)

    async def comment_count(self, record: PostRecord) -> int:
        return await self.get_property(record, PostProperty.COMMENT_COUNT)

    async def author(self, record: PostRecord) -> Optional[User]:
        return await self.get_property(record, PostProperty.AUTHOR)

    async def info(self, record: PostRecord) -> PostInfo:
        return await self.get_property(record, PostProperty.INFO)

    async def _load_permalink(self, record: PostRecord) -> str:
        slug = record.post.slug or record.slug
        return self.url_builder.build("display_post", {"slug": slug})

    async def _load_tags(self, record: PostRecord) -> list[str]:
        if record.tags is None:
            record.tags = (
                [] if record.is_new else await self.tag_service.get_post_tags(record.id)
            )
        return list(record.tags)

    async def _load_comments(self, record: PostRecord) -> list[Comment]:
        if record.comments is None:
            record.comments = (
                []
                if record.is_new
                else await self.comment_service.get_post_comments(record.id)
            )
        return list(record.comments)

    async def _load_comment_count(self, record: PostRecord) -> int:
        if record.comments is not None:
            return len(record.comments)
        if record.is_new:
            return 0
        return await self.comment_service.count_post_comments(record.id)

    async def _load_author(self, record: PostRecord) -> Optional[User]:
        if record.author is None and record.user_id:
            try:
                record.author = await self.user_service.get_by_id(record.user_id)
            except NotFoundError:
                logfire.warn(
                    "Post author not found", post_id=record.id, user_id=record.user_id
                )
        return record.author

    async def _load_info(self, record: PostRecord) -> PostInfo:
        if not record.info.loaded:
            await record.info.load(record.id)
        return record.info
