"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from quill.config import SiteSettings, Settings, SlugSettings
from quill.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_site_settings(self, settings: Settings) -> SiteSettings:
        """Provide public site settings."""
        return settings.site

    @provide(scope=Scope.APP)
    def provide_slug_settings(self, settings: Settings) -> SlugSettings:
        """Provide slug allocation settings."""
        return settings.slug
