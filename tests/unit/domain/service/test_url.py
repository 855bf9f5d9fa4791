"""Unit tests for SiteUrlBuilder."""

import pytest

from quill.config import SiteSettings
from quill.domain.error import NotFoundError
from quill.domain.service import SiteUrlBuilder


class TestSiteUrlBuilder:
    def test_builds_post_permalink(self):
        builder = SiteUrlBuilder(SiteSettings())
        assert builder.build("display_post", {"slug": "hello-world"}) == (
            "http://localhost/hello-world"
        )

    def test_uses_protocol_and_port(self):
        builder = SiteUrlBuilder(
            SiteSettings(hostname="example.com", protocol="https", port=8443)
        )
        assert builder.build("display_post", {"slug": "a"}) == "https://example.com:8443/a"

    def test_quotes_params(self):
        builder = SiteUrlBuilder(SiteSettings())
        assert builder.build("display_posts_by_tag", {"tag": "a b/c"}) == (
            "http://localhost/tag/a%20b%2Fc"
        )

    def test_unknown_route_raises(self):
        with pytest.raises(NotFoundError):
            SiteUrlBuilder(SiteSettings()).build("display_feed", {})
