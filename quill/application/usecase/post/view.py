"""Post view shared by the post use case responses."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from quill.domain.model import PostRecord
from quill.domain.service import PostService


class PostView(BaseModel):
    """Read model of a stored post."""

    post_id: int
    slug: str
    title: str
    guid: str
    content: str
    status: str
    content_type: int
    user_id: int
    pubdate: datetime
    updated: datetime
    tags: list[str]
    permalink: str
    comment_count: int
    info: dict[str, Any]


async def build_post_view(post_service: PostService, record: PostRecord) -> PostView:
    """Build the read model of a record, reading computed properties through
    their filter chains."""
    post = record.post
    info = await post_service.info(record)
    return PostView(
        post_id=post.id,
        slug=post.slug,
        title=post.title,
        guid=post.guid,
        content=post.content,
        status=await post_service.registry.status_name(post.status),
        content_type=post.content_type,
        user_id=post.user_id,
        pubdate=post.pubdate,
        updated=post.updated,
        tags=await post_service.tags(record),
        permalink=await post_service.permalink(record),
        comment_count=await post_service.comment_count(record),
        info=dict(info.items()),
    )
