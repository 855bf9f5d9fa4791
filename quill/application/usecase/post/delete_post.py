"""Delete post use case."""

import logfire
from pydantic import BaseModel

from quill.application.usecase.base import BaseUseCase
from quill.domain.error import NotFoundError
from quill.domain.service import PostService
from quill.domain.value import PostId, PostState


class DeletePostRequest(BaseModel):
    """Delete post request.

    A soft delete (the default) keeps the row under the 'deleted' status.
    """

    post_id: int
    hard: bool = False


class DeletePostResponse(BaseModel):
    """Delete post response."""

    post_id: int
    state: PostState


class DeletePostUseCase(BaseUseCase):
    """Use case for soft or hard deleting a post."""

    def __init__(self, post_service: PostService) -> None:
        """Initialize delete post use case.

        Args:
            post_service: Post service
        """
        self.post_service = post_service

    async def execute(self, request: DeletePostRequest) -> DeletePostResponse:
        """Execute delete post flow.

        Raises:
            NotFoundError: If the post does not exist
            PersistenceError: If a stage of the delete fails
        """
        with logfire.span(
            "delete_post.execute", post_id=request.post_id, hard=request.hard
        ):
            record = await self.post_service.get_by_id(PostId(request.post_id))
            if record is None:
                raise NotFoundError("Post", str(request.post_id))

            await self.post_service.delete(record, hard=request.hard)
            return DeletePostResponse(
                post_id=request.post_id,
                state=await self.post_service.state(record),
            )
