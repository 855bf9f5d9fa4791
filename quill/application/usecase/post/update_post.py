"""Update post use case."""

from datetime import datetime
from typing import Any

import logfire
from pydantic import BaseModel

from quill.domain.error import NotFoundError
from quill.domain.service import PostService
from quill.domain.value import PostId

from .view import PostView, build_post_view


class UpdatePostRequest(BaseModel):
    """Update post request.

    Only the fields that are set are staged. An update with nothing set
    still refreshes ``updated`` and rewrites the tag associations.
    """

    post_id: int
    title: str | None = None
    content: str | None = None
    slug: str | None = None
    tags: str | list[str] | None = None
    status: int | str | None = None
    content_type: int | str | None = None
    pubdate: datetime | str | None = None
    user_id: int | None = None
    info: dict[str, Any] | None = None
    remove_info: list[str] = []


class UpdatePostResponse(BaseModel):
    """Update post response."""

    post: PostView


class UpdatePostUseCase:
    """Use case for updating a stored post."""

    def __init__(self, post_service: PostService) -> None:
        """Initialize update post use case.

        Args:
            post_service: Post service
        """
        self.post_service = post_service

    async def execute(self, request: UpdatePostRequest) -> UpdatePostResponse:
        """Execute update post flow.

        Args:
            request: Update post request

        Returns:
            Updated post details

        Raises:
            NotFoundError: If the post does not exist
            ValidationError: If a field value is invalid
            PersistenceError: If a sub-write fails
        """
        with logfire.span("update_post.execute", post_id=request.post_id):
            record = await self.post_service.get_by_id(PostId(request.post_id))
            if record is None:
                raise NotFoundError("Post", str(request.post_id))

            fields = request.model_dump(
                exclude_none=True, exclude={"post_id", "remove_info"}
            )
            for field, value in fields.items():
                await self.post_service.stage(record, field, value)
            for key in request.remove_info:
                record.info.unset(key)

            await self.post_service.update(record)
            return UpdatePostResponse(
                post=await build_post_view(self.post_service, record)
            )
