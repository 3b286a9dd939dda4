"""
Tests for content URL parsing. HTTP is mocked; only image URLs use it.
"""
from unittest.mock import MagicMock

import pytest
import requests

from story_build.errors import ValidationError
from story_build.url_parser import get_supported_platforms, parse_content_url


def _session(content_type="image/png", error=None):
    session = MagicMock()
    if error is not None:
        session.head.side_effect = error
    else:
        session.head.return_value.headers = {"content-type": content_type}
    return session


class TestPlatformParsers:

    def test_instagram_post(self):
        content = parse_content_url("https://www.instagram.com/p/Cx12_ab-Z/")
        assert content.platform == "Instagram"
        assert content.title == "Instagram Post Cx12_ab-Z"
        assert {"trait_type": "Post ID", "value": "Cx12_ab-Z"} in content.attributes

    def test_instagram_reel(self):
        assert parse_content_url("https://instagram.com/reel/AbC123").title == "Instagram Post AbC123"

    @pytest.mark.parametrize("host", ["twitter.com", "x.com", "www.x.com"])
    def test_twitter(self, host):
        content = parse_content_url(f"https://{host}/storyprotocol/status/1789")
        assert content.platform == "Twitter"
        assert content.creator == "@storyprotocol"
        assert content.title == "Tweet by @storyprotocol"

    def test_artstation(self):
        content = parse_content_url("https://www.artstation.com/artwork/q9X8zZ")
        assert content.platform == "ArtStation"
        assert content.media_type == "image"

    def test_behance(self):
        content = parse_content_url("https://www.behance.net/gallery/123456/Brand-Identity-Kit")
        assert content.title == "Behance Project: Brand Identity Kit"

    @pytest.mark.parametrize("url", [
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=10",
        "https://youtu.be/dQw4w9WgXcQ",
        "https://youtube.com/shorts/dQw4w9WgXcQ",
        "https://m.youtube.com/watch?v=dQw4w9WgXcQ",
    ])
    def test_youtube(self, url):
        content = parse_content_url(url)
        assert content.platform == "YouTube"
        assert content.media_type == "video"
        assert content.image_url == "https://img.youtube.com/vi/dQw4w9WgXcQ/maxresdefault.jpg"

    @pytest.mark.parametrize("url", [
        "https://www.instagram.com/storyprotocol/",
        "https://twitter.com/storyprotocol",
        "https://www.artstation.com/someone",
        "https://www.behance.net/someone",
        "https://www.youtube.com/channel/abc",
    ])
    def test_platform_url_without_content_id(self, url):
        with pytest.raises(ValidationError, match="Invalid"):
            parse_content_url(url)

    def test_supported_platforms_listed(self):
        platforms = get_supported_platforms()
        assert "x.com" in platforms
        assert platforms[-1] == "direct image URLs"


class TestImageUrls:

    def test_direct_image(self):
        session = _session("image/jpeg")
        content = parse_content_url("https://cdn.example.com/art/piece.jpg", session=session)
        assert content.platform == "Direct URL"
        assert content.image_url == "https://cdn.example.com/art/piece.jpg"
        assert {"trait_type": "File Format", "value": "JPG"} in content.attributes
        session.head.assert_called_once_with(
            "https://cdn.example.com/art/piece.jpg", allow_redirects=True, timeout=10
        )

    def test_non_image_rejected(self):
        with pytest.raises(ValidationError, match="text/html"):
            parse_content_url("https://example.com/page", session=_session("text/html"))

    def test_unreachable(self):
        session = _session(error=requests.ConnectionError("no route"))
        with pytest.raises(ValidationError, match="Could not reach"):
            parse_content_url("https://example.com/a.png", session=session)

    @pytest.mark.parametrize("url", ["ftp://example.com/a.png", "example.com/a.png", "", None])
    def test_requires_http(self, url):
        with pytest.raises(ValidationError, match="http"):
            parse_content_url(url)
