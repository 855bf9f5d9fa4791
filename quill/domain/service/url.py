"""URL building for post permalinks."""

from abc import ABC, abstractmethod
from typing import Any
from urllib.parse import quote

from quill.config import SiteSettings
from quill.domain.error import NotFoundError


class UrlBuilder(ABC):
    """Builds public URLs from a route name and its parameters."""

    @abstractmethod
    def build(self, route_name: str, params: dict[str, Any]) -> str:
        """Build the URL of a named route.

        Args:
            route_name: Route name, e.g. 'display_post'
            params: Values for the route's placeholders

        Returns:
            Absolute URL

        Raises:
            NotFoundError: If the route is unknown
        """
        pass


class SiteUrlBuilder(UrlBuilder):
    """URL builder backed by the route templates in SiteSettings."""

    def __init__(self, site: SiteSettings) -> None:
        self.site = site

    def build(self, route_name: str, params: dict[str, Any]) -> str:
        template = self.site.routes.get(route_name)
        if template is None:
            raise NotFoundError("Route", route_name)
        path = template.format(
            **{name: quote(str(value), safe="") for name, value in params.items()}
        )
        return f"{self.site.base_url}{path}"
