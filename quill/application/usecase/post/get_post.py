"""Get post use case."""

from pydantic import BaseModel

from quill.domain.error import NotFoundError
from quill.domain.service import PostService
from quill.domain.value import PostId, Slug

from .view import PostView, build_post_view


class GetPostRequest(BaseModel):
    """Get post request.

    Accepts either post_id or slug for lookup.
    """

    post_id: int | None = None
    slug: str | None = None

    def model_post_init(self, __context):
        """Validate that either post_id or slug is provided."""
        if self.post_id is None and not self.slug:
            raise ValueError("Either post_id or slug must be provided")
        if self.post_id is not None and self.slug:
            raise ValueError("Provide either post_id or slug, not both")


class GetPostResponse(BaseModel):
    """Get post response."""

    post: PostView


class GetPostUseCase:
    """Use case for retrieving a post by ID or slug."""

    def __init__(self, post_service: PostService) -> None:
        """Initialize get post use case.

        Args:
            post_service: Post service
        """
        self.post_service = post_service

    async def execute(self, request: GetPostRequest) -> GetPostResponse:
        """Execute get post flow.

        Raises:
            NotFoundError: If no post matches
        """
        if request.slug:
            record = await self.post_service.get_by_slug(Slug(request.slug))
            identifier = request.slug
        else:
            record = await self.post_service.get_by_id(PostId(request.post_id))
            identifier = str(request.post_id)

        if record is None:
            raise NotFoundError("Post", identifier)

        return GetPostResponse(post=await build_post_view(self.post_service, record))
