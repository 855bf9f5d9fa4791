"""Domain layer DI providers."""

from dishka import Scope, provide

from quill.config import Settings, SiteSettings, SlugSettings
from quill.domain.repository import (
    CommentRepository,
    LookupRepository,
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
    UrlBuilder,
    UserService,
)
from quill.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each unit of work gets fresh service instances with their own transaction.
    The status/type registry, hook dispatcher and URL builder hold no session
    and live for the whole process.
    """

    scope = Scope.REQUEST

    @provide(scope=Scope.APP)
    def get_registry(self, lookup_repository: LookupRepository) -> TypeStatusRegistry:
        """Provide the process-wide status/type registry."""
        return TypeStatusRegistry(lookup_repository=lookup_repository)

    @provide(scope=Scope.APP)
    def get_hooks(self) -> HookDispatcher:
        """Provide the process-wide hook dispatcher."""
        return HookDispatcher()

    @provide(scope=Scope.APP)
    def get_url_builder(self, site: SiteSettings) -> UrlBuilder:
        """Provide URL builder for permalinks."""
        return SiteUrlBuilder(site)

    @provide
    def get_comment_service(
        self, comment_repository: CommentRepository
    ) -> CommentService:
        """Provide comment domain service."""
        return CommentService(comment_repository=comment_repository)

    @provide
    def get_tag_service(self, tag_repository: TagRepository) -> TagService:
        """Provide tag domain service."""
        return TagService(tag_repository=tag_repository)

    @provide
    def get_user_service(self, user_repository: UserRepository) -> UserService:
        """Provide user domain service."""
        return UserService(user_repository=user_repository)

    @provide
    def get_slug_allocator(
        self, post_repository: PostRepository, settings: SlugSettings
    ) -> SlugAllocator:
        """Provide slug allocator."""
        return SlugAllocator(post_repository=post_repository, settings=settings)

    @provide
    def get_post_service(
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
    ) -> PostService:
        """Provide post domain service."""
        return PostService(
            post_repository=post_repository,
            info_repository=info_repository,
            tag_service=tag_service,
            comment_service=comment_service,
            user_service=user_service,
            registry=registry,
            slug_allocator=slug_allocator,
            hooks=hooks,
            url_builder=url_builder,
            settings=settings,
        )
