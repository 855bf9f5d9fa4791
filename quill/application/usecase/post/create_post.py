"""Create post use case."""

from datetime import datetime
from typing import Any

import logfire
from pydantic import BaseModel

from quill.application.usecase.base import BaseUseCase
from quill.domain.service import PostService

from .view import PostView, build_post_view


class CreatePostRequest(BaseModel):
    """Create post request.

    ``tags`` takes free-form text ('a, "b, c"') or a list. ``status`` and
    ``content_type`` take a code or a name. ``pubdate`` takes any parseable
    date text.
    """

    title: str
    content: str = ""
    slug: str | None = None
    tags: str | list[str] = []
    status: int | str | None = None
    content_type: int | str | None = None
    pubdate: datetime | str | None = None
    user_id: int = 0
    info: dict[str, Any] = {}


class CreatePostResponse(BaseModel):
    """Create post response."""

    post: PostView


class CreatePostUseCase(BaseUseCase):
    """Use case for creating a new post."""

    def __init__(self, post_service: PostService) -> None:
        """Initialize create post use case.

        Args:
            post_service: Post domain service
        """
        self.post_service = post_service

    async def execute(self, request: CreatePostRequest) -> CreatePostResponse:
        """Execute create post flow.

        Steps:
        1. Stage the supplied fields on a new record (normalized by PostService)
        2. Insert it: slug allocation, row write, info, tags, post_insert

        Args:
            request: Create post request

        Returns:
            Create post response with post details

        Raises:
            ValidationError: If a field value is invalid
            NotFoundError: If a status or type name is unknown
            PersistenceError: If a sub-write fails
        """
        with logfire.span("create_post.execute", title=request.title):
            fields = request.model_dump(exclude_none=True)
            if not fields.get("info"):
                fields.pop("info", None)
            record = await self.post_service.create(fields)

            logfire.info(
                "Post created successfully",
                post_id=record.id,
                slug=record.post.slug,
            )
            return CreatePostResponse(
                post=await build_post_view(self.post_service, record)
            )
