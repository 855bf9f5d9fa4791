"""Domain services."""

from .base import Service
from .comment_service import CommentService
from .hooks import HookDispatcher
from .post_info import PostInfo
from .post_service import PostService
from .registry import TypeStatusRegistry
from .slug_service import SlugAllocator
from .tag_service import TagService
from .url import SiteUrlBuilder, UrlBuilder
from .user_service import UserService

__all__ = [
    "CommentService",
    "HookDispatcher",
    "PostInfo",
    "PostService",
    "Service",
    "SiteUrlBuilder",
    "SlugAllocator",
    "TagService",
    "TypeStatusRegistry",
    "UrlBuilder",
    "UserService",
]
