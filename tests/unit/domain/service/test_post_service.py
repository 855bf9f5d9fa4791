"""Unit tests for PostService."""

import re
from datetime import datetime

import pytest

from quill.config import Settings
from quill.domain.error import (
    ConflictError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from quill.domain.model import Post, User
from quill.domain.model.post import EDITABLE_FIELDS
from quill.domain.repository import (
    CommentRepository,
    PostInfoRepository,
    PostRepository,
    TagRepository,
    UserRepository,
)
from quill.domain.service import (
    CommentService,
    HookDispatcher,
    PostService,
    SiteUrlBuilder,
    SlugAllocator,
    TagService,
    TypeStatusRegistry,
    UserService,
)
from quill.domain.value import PostId, PostState, Slug, UserId
from quill.persistence.repository.inmemory import (
    InMemoryCommentRepository,
    InMemoryLookupRepository,
    InMemoryPostInfoRepository,
    InMemoryPostRepository,
    InMemoryTagRepository,
    InMemoryUserRepository,
)
from tests.conftest import make_comment
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no database needed
unit_env = create_env_fixture()


def build_post_service(
    post_repo: PostRepository | None = None,
    lookup_repo: InMemoryLookupRepository | None = None,
) -> PostService:
    """Build a PostService by hand, for tests that need a custom repository."""
    settings = Settings()
    post_repo = post_repo or InMemoryPostRepository()
    return PostService(
        post_repository=post_repo,
        info_repository=InMemoryPostInfoRepository(),
        tag_service=TagService(InMemoryTagRepository()),
        comment_service=CommentService(InMemoryCommentRepository()),
        user_service=UserService(InMemoryUserRepository()),
        registry=TypeStatusRegistry(lookup_repo or InMemoryLookupRepository()),
        slug_allocator=SlugAllocator(post_repo, settings.slug),
        hooks=HookDispatcher(),
        url_builder=SiteUrlBuilder(settings.site),
        settings=settings,
    )


class StaleProbePostRepository(InMemoryPostRepository):
    """Existence probe never sees other writers, like a lost race."""

    async def slug_exists(self, slug: Slug) -> bool:
        return False


class AlwaysConflictingPostRepository(InMemoryPostRepository):
    """Every insert loses the race for its slug."""

    async def insert(self, post: Post) -> PostId:
        raise ConflictError(post.slug)


class FailingPostRepository(InMemoryPostRepository):
    """Row writes fail once armed."""

    def __init__(self) -> None:
        super().__init__()
        self.fail = False

    async def insert(self, post: Post) -> PostId:
        if self.fail:
            raise PersistenceError("connection lost", stage="post")
        return await super().insert(post)

    async def update(self, post: Post, key_slug: str) -> None:
        if self.fail:
            raise PersistenceError("connection lost", stage="post", post_id=post.id)
        await super().update(post, key_slug)

    async def delete(self, post_id: PostId) -> None:
        if self.fail:
            raise PersistenceError("connection lost", stage="post", post_id=post_id)
        await super().delete(post_id)


class IdlessRowPostRepository(InMemoryPostRepository):
    """Returns a stored row that lost its id."""

    async def find_by_slug(self, slug: Slug) -> Post:
        return Post(slug=str(slug), title="Orphan")


class TestNewRecord:
    """Tests for new_record() and staging."""

    @pytest.mark.asyncio
    async def test_defaults_to_draft_entry(self, unit_env):
        # Arrange
        post_service = await unit_env.get(PostService)

        # Act
        record = await post_service.new_record()

        # Assert
        assert record.is_new
        assert record.status == 1
        assert record.content_type == 1
        assert record.tags == []
        assert await post_service.state(record) == PostState.NEW

    @pytest.mark.asyncio
    async def test_status_and_type_accept_names_and_codes(self, unit_env):
        post_service = await unit_env.get(PostService)
        record = await post_service.new_record(status="Published", content_type="page")

        assert record.status == 2
        assert record.content_type == 2

        await post_service.stage(record, "status", "3")
        assert record.status == 3

    @pytest.mark.asyncio
    async def test_unknown_status_raises_not_found(self, unit_env):
        post_service = await unit_env.get(PostService)
        with pytest.raises(NotFoundError):
            await post_service.new_record(status="archived")

    @pytest.mark.asyncio
    async def test_unknown_field_raises_validation_error(self, unit_env):
        post_service = await unit_env.get(PostService)
        with pytest.raises(ValidationError):
            await post_service.new_record(color="red")

    @pytest.mark.asyncio
    async def test_wrongly_typed_values_raise_validation_error(self, unit_env):
        post_service = await unit_env.get(PostService)
        with pytest.raises(ValidationError):
            await post_service.new_record(title="ok", user_id="abc")
        with pytest.raises(ValidationError):
            await post_service.create({"title": 5})

    @pytest.mark.asyncio
    async def test_pubdate_text_is_parsed(self, unit_env):
        post_service = await unit_env.get(PostService)
        record = await post_service.new_record(pubdate="2024-01-02 10:00")
        assert record.pubdate == datetime(2024, 1, 2, 10, 0)

    @pytest.mark.asyncio
    async def test_unparseable_pubdate_raises(self, unit_env):
        post_service = await unit_env.get(PostService)
        record = await post_service.new_record()
        with pytest.raises(ValidationError):
            post_service.set_pubdate(record, "not a date at all")

    @pytest.mark.asyncio
    async def test_tag_text_is_tokenized(self, unit_env):
        post_service = await unit_env.get(PostService)
        record = await post_service.new_record(tags='python, "hello, world"')
        assert record.tags == ["python", "hello, world"]


class TestInsert:
    """Tests for insert() / create()."""

    @pytest.mark.asyncio
    async def test_slug_derived_from_title(self, unit_env):
        """Should derive the slug from the title and assign an id."""
        # Arrange
        post_service = await unit_env.get(PostService)

        # Act
        record = await post_service.create({"title": "My First Post!"})

        # Assert
        assert record.id is not None
        assert record.slug == "my-first-post"
        assert not record.changes
        assert await post_service.state(record) == PostState.PERSISTED

    @pytest.mark.asyncio
    async def test_second_post_with_same_title_gets_postfix(self, unit_env):
        post_service = await unit_env.get(PostService)

        first = await post_service.create({"title": "My First Post!"})
        second = await post_service.create({"title": "My First Post!"})

        assert first.slug == "my-first-post"
        assert second.slug == "my-first-post-1"

    @pytest.mark.asyncio
    async def test_explicit_slug_is_normalized(self, unit_env):
        post_service = await unit_env.get(PostService)
        record = await post_service.create({"title": "Hello", "slug": "Custom Slug"})
        assert record.slug == "custom-slug"

    @pytest.mark.asyncio
    async def test_tags_written_as_associations(self, unit_env):
        """Should write exactly one association per tag."""
        # Arrange
        post_service = await unit_env.get(PostService)
        tag_repo = await unit_env.get(TagRepository)

        # Act
        record = await post_service.create({"title": "Tagged", "tags": ["a", "b"]})

        # Assert
        rows = [row for row in tag_repo.associations if row[1] == record.id]
        assert len(rows) == 2
        assert await tag_repo.find_by_post(record.id) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_guid_generated(self, unit_env):
        post_service = await unit_env.get(PostService)
        record = await post_service.create({"title": "My First Post"})
        assert re.match(r"^tag:localhost,\d{4}:my-first-post/\d+$", record.guid)

    @pytest.mark.asyncio
    async def test_malformed_guid_regenerated(self, unit_env):
        post_service = await unit_env.get(PostService)
        record = await post_service.create({"title": "Imported", "guid": "//?p="})
        assert record.guid.startswith("tag:localhost,")

    @pytest.mark.asyncio
    async def test_valid_guid_kept(self, unit_env):
        post_service = await unit_env.get(PostService)
        record = await post_service.create(
            {"title": "Imported", "guid": "urn:uuid:1234"}
        )
        assert record.guid == "urn:uuid:1234"

    @pytest.mark.asyncio
    async def test_info_committed_after_id_assigned(self, unit_env):
        # Arrange
        post_service = await unit_env.get(PostService)
        info_repo = await unit_env.get(PostInfoRepository)

        # Act
        record = await post_service.create(
            {"title": "With info", "info": {"comments_disabled": True}}
        )

        # Assert
        assert await info_repo.load(record.id) == {"comments_disabled": True}
        assert not record.info.is_dirty

    @pytest.mark.asyncio
    async def test_post_insert_notified(self, unit_env):
        post_service = await unit_env.get(PostService)
        hooks = await unit_env.get(HookDispatcher)
        seen = []
        hooks.add_action("post_insert", lambda record, payload: seen.append(record.id))

        record = await post_service.create({"title": "Announce"})

        assert seen == [record.id]

    @pytest.mark.asyncio
    async def test_insert_stored_record_raises(self, unit_env):
        post_service = await unit_env.get(PostService)
        record = await post_service.create({"title": "Once"})
        with pytest.raises(ValidationError):
            await post_service.insert(record)

    @pytest.mark.asyncio
    async def test_lost_slug_race_retries_with_next_postfix(self):
        """A conflict on insert re-allocates instead of failing."""
        # Arrange
        post_repo = StaleProbePostRepository()
        post_service = build_post_service(post_repo)
        await post_repo.insert(Post(slug="hello", guid="g-1"))

        # Act
        record = await post_service.create({"title": "Hello"})

        # Assert
        assert record.slug == "hello-1"

    @pytest.mark.asyncio
    async def test_slug_retries_exhausted(self):
        """Should raise a 'slug' PersistenceError and leave the record NEW."""
        # Arrange
        post_service = build_post_service(AlwaysConflictingPostRepository())
        record = await post_service.new_record(title="Contended")

        # Act
        with pytest.raises(PersistenceError) as exc_info:
            await post_service.insert(record)

        # Assert
        assert exc_info.value.stage == "slug"
        assert record.is_new
        assert record.changes.get("title") == "Contended"

    @pytest.mark.asyncio
    async def test_row_failure_keeps_record_new(self):
        # Arrange
        post_repo = FailingPostRepository()
        post_repo.fail = True
        post_service = build_post_service(post_repo)
        record = await post_service.new_record(title="Doomed", tags=["x"])

        # Act
        with pytest.raises(PersistenceError) as exc_info:
            await post_service.insert(record)

        # Assert
        assert exc_info.value.stage == "post"
        assert record.is_new
        assert record.changes.has("title")


class TestUpdate:
    """Tests for update()."""

    @pytest.mark.asyncio
    async def test_update_new_record_raises(self, unit_env):
        post_service = await unit_env.get(PostService)
        record = await post_service.new_record(title="Unsaved")
        with pytest.raises(ValidationError):
            await post_service.update(record)

    @pytest.mark.asyncio
    async def test_changed_title_keeps_slug(self, unit_env):
        post_service = await unit_env.get(PostService)
        record = await post_service.create({"title": "Original"})

        await post_service.stage(record, "title", "Renamed")
        await post_service.update(record)

        assert record.post.title == "Renamed"
        assert record.slug == "original"

    @pytest.mark.asyncio
    async def test_slug_change_to_taken_slug_gets_postfix(self, unit_env):
        post_service = await unit_env.get(PostService)
        await post_service.create({"title": "Taken"})
        record = await post_service.create({"title": "Other"})

        await post_service.stage(record, "slug", "taken")
        await post_service.update(record)

        assert record.slug == "taken-1"
        assert await post_service.get_by_slug(Slug("other")) is None

    @pytest.mark.asyncio
    async def test_staged_guid_discarded(self, unit_env):
        post_service = await unit_env.get(PostService)
        record = await post_service.create({"title": "Stable"})
        original_guid = record.guid

        await post_service.stage(record, "guid", "urn:replaced")
        await post_service.update(record)

        assert record.guid == original_guid

    @pytest.mark.asyncio
    async def test_update_without_changes(self, unit_env):
        """Refreshes `updated` and re-writes tags, with no field notifications."""
        # Arrange
        post_service = await unit_env.get(PostService)
        hooks = await unit_env.get(HookDispatcher)
        tag_repo = await unit_env.get(TagRepository)
        record = await post_service.create({"title": "Quiet", "tags": ["a", "b"]})

        old = datetime(2000, 1, 1)
        record.post = record.post.model_copy(update={"updated": old})
        tag_repo.associations.clear()

        notified = []
        for field in EDITABLE_FIELDS:
            hooks.add_action(
                f"update_post_{field}",
                lambda rec, value, field=field: notified.append(field),
            )

        # Act
        await post_service.update(record)

        # Assert
        assert record.post.updated > old
        assert await tag_repo.find_by_post(record.id) == ["a", "b"]
        assert notified == []

    @pytest.mark.asyncio
    async def test_changed_fields_notified_before_write(self, unit_env):
        # Arrange
        post_service = await unit_env.get(PostService)
        hooks = await unit_env.get(HookDispatcher)
        record = await post_service.create({"title": "Before", "content": "Same"})
        seen = []
        hooks.add_action(
            "update_post_title",
            lambda rec, value: seen.append((rec.post.title, value)),
        )
        hooks.add_action("update_post_content", lambda rec, value: seen.append(value))

        # Act
        await post_service.stage(record, "title", "After")
        await post_service.stage(record, "content", "Same")
        await post_service.update(record)

        # Assert
        assert seen == [("Before", "After")]

    @pytest.mark.asyncio
    async def test_failing_observer_does_not_abort_save(self, unit_env):
        post_service = await unit_env.get(PostService)
        hooks = await unit_env.get(HookDispatcher)
        record = await post_service.create({"title": "Robust"})

        def broken(rec, value):
            raise RuntimeError("observer failed")

        hooks.add_action("update_post_title", broken)
        await post_service.stage(record, "title", "Still saved")
        await post_service.update(record)

        stored = await post_service.get_by_id(record.id)
        assert stored.title == "Still saved"

    @pytest.mark.asyncio
    async def test_replacing_tags_leaves_no_residue(self, unit_env):
        # Arrange
        post_service = await unit_env.get(PostService)
        tag_repo = await unit_env.get(TagRepository)
        record = await post_service.create({"title": "Retag", "tags": ["a", "b"]})

        # Act
        await post_service.stage(record, "tags", ["b", "c"])
        await post_service.update(record)
        await post_service.update(record)

        # Assert
        assert await tag_repo.find_by_post(record.id) == ["b", "c"]
        assert len([row for row in tag_repo.associations if row[1] == record.id]) == 2

    @pytest.mark.asyncio
    async def test_info_unset_on_update(self, unit_env):
        post_service = await unit_env.get(PostService)
        info_repo = await unit_env.get(PostInfoRepository)
        record = await post_service.create(
            {"title": "Info", "info": {"legacy_id": "7", "keep": 1}}
        )

        record.info.unset("legacy_id")
        await post_service.update(record)

        assert await info_repo.load(record.id) == {"keep": 1}

    @pytest.mark.asyncio
    async def test_row_failure_preserves_changeset(self):
        # Arrange
        post_repo = FailingPostRepository()
        post_service = build_post_service(post_repo)
        record = await post_service.create({"title": "Stable"})
        await post_service.stage(record, "title", "Unsaved edit")
        post_repo.fail = True

        # Act
        with pytest.raises(PersistenceError):
            await post_service.update(record)

        # Assert
        assert record.changes.get("title") == "Unsaved edit"
        assert record.post.title == "Stable"


class TestDelete:
    """Tests for delete()."""

    @pytest.mark.asyncio
    async def test_delete_new_record_raises(self, unit_env):
        post_service = await unit_env.get(PostService)
        record = await post_service.new_record(title="Unsaved")
        with pytest.raises(ValidationError):
            await post_service.delete(record)

    @pytest.mark.asyncio
    async def test_soft_delete_keeps_row(self, unit_env):
        """Should set the deleted status and keep the row."""
        # Arrange
        post_service = await unit_env.get(PostService)
        post_repo = await unit_env.get(PostRepository)
        record = await post_service.create({"title": "Soft"})

        # Act
        await post_service.delete(record)

        # Assert
        stored = await post_repo.find_by_id(record.id)
        assert stored is not None
        assert stored.status == 4
        assert await post_service.state(record) == PostState.SOFT_DELETED

    @pytest.mark.asyncio
    async def test_hard_delete_removes_dependents(self, unit_env):
        """Should remove the row, comments, tag associations and info."""
        # Arrange
        post_service = await unit_env.get(PostService)
        post_repo = await unit_env.get(PostRepository)
        tag_repo = await unit_env.get(TagRepository)
        info_repo = await unit_env.get(PostInfoRepository)
        comment_repo = await unit_env.get(CommentRepository)
        hooks = await unit_env.get(HookDispatcher)

        record = await post_service.create(
            {"title": "Hard", "tags": ["a"], "info": {"k": "v"}}
        )
        other = await post_service.create({"title": "Other", "tags": ["a"]})
        await comment_repo.save(make_comment(1, record.id))
        await comment_repo.save(make_comment(2, record.id))
        await comment_repo.save(make_comment(3, other.id))

        deleted = []
        hooks.add_action("post_delete", lambda rec, payload: deleted.append(rec.id))

        # Act
        await post_service.delete(record, hard=True)

        # Assert
        assert deleted == [record.id]
        assert await post_repo.find_by_id(record.id) is None
        assert await comment_repo.count_by_post(record.id) == 0
        assert await comment_repo.count_by_post(other.id) == 1
        assert await tag_repo.find_by_post(record.id) == []
        assert await tag_repo.find_by_post(other.id) == ["a"]
        assert await info_repo.load(record.id) == {}
        assert await post_service.state(record) == PostState.HARD_DELETED

    @pytest.mark.asyncio
    async def test_hard_delete_twice_is_a_no_op(self, unit_env):
        post_service = await unit_env.get(PostService)
        record = await post_service.create({"title": "Twice"})

        await post_service.delete(record, hard=True)
        await post_service.delete(record, hard=True)

        assert record.removed
        with pytest.raises(ValidationError):
            await post_service.update(record)

    @pytest.mark.asyncio
    async def test_row_failure_reports_removed_comments(self):
        # Arrange
        post_repo = FailingPostRepository()
        post_service = build_post_service(post_repo)
        record = await post_service.create({"title": "Partial"})
        await post_service.comment_service.comment_repository.save(
            make_comment(1, record.id)
        )
        post_repo.fail = True

        # Act
        with pytest.raises(PersistenceError) as exc_info:
            await post_service.delete(record, hard=True)

        # Assert
        assert exc_info.value.stage == "post"
        assert "1 comments" in str(exc_info.value)
        assert not record.removed


class TestPublish:
    """Tests for publish()."""

    @pytest.mark.asyncio
    async def test_publish_new_record_inserts(self, unit_env):
        post_service = await unit_env.get(PostService)
        record = await post_service.new_record(title="Go live")

        await post_service.publish(record)

        assert record.id is not None
        assert record.post.status == 2

    @pytest.mark.asyncio
    async def test_publish_stored_record_updates(self, unit_env):
        post_service = await unit_env.get(PostService)
        record = await post_service.create({"title": "Draft first"})

        await post_service.publish(record)

        stored = await post_service.get_by_id(record.id)
        assert stored.post.status == 2

    @pytest.mark.asyncio
    async def test_legacy_publish_status_name(self):
        lookup_repo = InMemoryLookupRepository(
            statuses=[("draft", 1), ("publish", 5), ("deleted", 4)]
        )
        post_service = build_post_service(lookup_repo=lookup_repo)
        record = await post_service.new_record(title="Legacy")

        await post_service.publish(record)

        assert record.post.status == 5

    @pytest.mark.asyncio
    async def test_no_published_status_raises(self):
        lookup_repo = InMemoryLookupRepository(statuses=[("draft", 1)])
        post_service = build_post_service(lookup_repo=lookup_repo)
        record = await post_service.new_record(title="Nowhere")

        with pytest.raises(NotFoundError):
            await post_service.publish(record)


class TestLookup:
    """Tests for get_by_id() / get_by_slug()."""

    @pytest.mark.asyncio
    async def test_get_by_slug_loads_tags_and_info(self, unit_env):
        post_service = await unit_env.get(PostService)
        created = await post_service.create(
            {"title": "Find me", "tags": ["x"], "info": {"k": 1}}
        )

        record = await post_service.get_by_slug(Slug("find-me"))

        assert record.id == created.id
        assert record.tags == ["x"]
        assert record.info.loaded
        assert record.info.get("k") == 1

    @pytest.mark.asyncio
    async def test_missing_post_returns_none(self, unit_env):
        post_service = await unit_env.get(PostService)
        assert await post_service.get_by_id(PostId(404)) is None
        assert await post_service.get_by_slug(Slug("nope")) is None

    @pytest.mark.asyncio
    async def test_stored_row_without_id_raises(self):
        post_service = build_post_service(IdlessRowPostRepository())
        with pytest.raises(ValidationError):
            await post_service.get_by_slug(Slug("orphan"))


class TestComputedProperties:
    """Tests for permalink, tags, comments, author and info."""

    @pytest.mark.asyncio
    async def test_permalink(self, unit_env):
        post_service = await unit_env.get(PostService)
        record = await post_service.create({"title": "Linked"})
        assert await post_service.permalink(record) == "http://localhost/linked"

    @pytest.mark.asyncio
    async def test_property_passes_through_filter(self, unit_env):
        post_service = await unit_env.get(PostService)
        hooks = await unit_env.get(HookDispatcher)
        hooks.add_filter("post_permalink", lambda value, rec: value + "?ref=feed")
        hooks.add_filter("post_tags", lambda value, rec: [t.upper() for t in value])
        record = await post_service.create({"title": "Filtered", "tags": ["a"]})

        assert await post_service.permalink(record) == "http://localhost/filtered?ref=feed"
        assert await post_service.tags(record) == ["A"]
        assert record.tags == ["a"]

    @pytest.mark.asyncio
    async def test_new_record_has_no_comments(self, unit_env):
        post_service = await unit_env.get(PostService)
        record = await post_service.new_record(title="Fresh")
        assert await post_service.comments(record) == []
        assert await post_service.comment_count(record) == 0

    @pytest.mark.asyncio
    async def test_comments_loaded_lazily(self, unit_env):
        # Arrange
        post_service = await unit_env.get(PostService)
        comment_repo = await unit_env.get(CommentRepository)
        record = await post_service.create({"title": "Discussed"})
        await comment_repo.save(make_comment(1, record.id))
        await comment_repo.save(make_comment(2, record.id))

        # Act
        count = await post_service.comment_count(record)
        comments = await post_service.comments(record)

        # Assert
        assert count == 2
        assert [c.id for c in comments] == [1, 2]
        assert await post_service.comment_count(record) == 2

    @pytest.mark.asyncio
    async def test_author(self, unit_env):
        post_service = await unit_env.get(PostService)
        user_repo = await unit_env.get(UserRepository)
        await user_repo.save(User(id=UserId(1), username="admin"))

        record = await post_service.create({"title": "Authored", "user_id": 1})
        orphan = await post_service.create({"title": "Orphan", "user_id": 5})

        author = await post_service.author(record)
        assert author.username == "admin"
        assert await post_service.author(orphan) is None

    @pytest.mark.asyncio
    async def test_info_loaded_on_demand(self, unit_env):
        post_service = await unit_env.get(PostService)
        created = await post_service.create({"title": "Info", "info": {"a": 1}})
        record = await post_service.get_by_id(created.id)
        record.info.loaded = False

        info = await post_service.info(record)

        assert info.loaded
        assert dict(info.items()) == {"a": 1}
