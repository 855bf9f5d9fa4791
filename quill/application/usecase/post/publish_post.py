"""Publish post use case."""

from pydantic import BaseModel

from quill.domain.error import NotFoundError
from quill.domain.service import PostService
from quill.domain.value import PostId

from .view import PostView, build_post_view


class PublishPostRequest(BaseModel):
    """Publish post request."""

    post_id: int


class PublishPostResponse(BaseModel):
    """Publish post response."""

    post: PostView


class PublishPostUseCase:
    """Use case for publishing a stored post."""

    def __init__(self, post_service: PostService) -> None:
        """Initialize publish post use case.

        Args:
            post_service: Post service
        """
        self.post_service = post_service

    async def execute(self, request: PublishPostRequest) -> PublishPostResponse:
        """Execute publish post flow.

        Raises:
            NotFoundError: If the post does not exist
        """
        record = await self.post_service.get_by_id(PostId(request.post_id))
        if record is None:
            raise NotFoundError("Post", str(request.post_id))

        await self.post_service.publish(record)
        return PublishPostResponse(
            post=await build_post_view(self.post_service, record)
        )
