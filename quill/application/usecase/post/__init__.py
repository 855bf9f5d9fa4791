"""Post use cases."""

from .create_post import CreatePostRequest, CreatePostResponse, CreatePostUseCase
from .delete_post import DeletePostRequest, DeletePostResponse, DeletePostUseCase
from .get_post import GetPostRequest, GetPostResponse, GetPostUseCase
from .publish_post import PublishPostRequest, PublishPostResponse, PublishPostUseCase
from .update_post import UpdatePostRequest, UpdatePostResponse, UpdatePostUseCase
from .view import PostView, build_post_view

__all__ = [
    "CreatePostRequest",
    "CreatePostResponse",
    "CreatePostUseCase",
    "DeletePostRequest",
    "DeletePostResponse",
    "DeletePostUseCase",
    "GetPostRequest",
    "GetPostResponse",
    "GetPostUseCase",
    "PostView",
    "PublishPostRequest",
    "PublishPostResponse",
    "PublishPostUseCase",
    "UpdatePostRequest",
    "UpdatePostResponse",
    "UpdatePostUseCase",
    "build_post_view",
]
