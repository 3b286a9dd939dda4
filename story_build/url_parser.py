"""
Content URL parsing for IP registration.

Recognizes posts on a handful of social/creative platforms and plain image
links, and turns them into a ParsedContent record used to generate IP and NFT
metadata. Only direct image URLs trigger a network call (an HTTP HEAD to
confirm the content type).
"""

import re
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qs, urlparse

import requests

from story_build.errors import ValidationError

HEAD_TIMEOUT_SECONDS = 10


@dataclass
class ParsedContent:
    title: str
    description: str
    platform: str
    original_url: str
    image_url: Optional[str] = None
    media_url: Optional[str] = None
    media_type: Optional[str] = None
    creator: Optional[str] = None
    attributes: List[Dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _attrs(**traits: str) -> List[Dict[str, str]]:
    return [{"trait_type": k.replace("_", " "), "value": v} for k, v in traits.items()]


def _host(url: str) -> str:
    host = (urlparse(url).hostname or "").lower()
    return host[4:] if host.startswith("www.") else host


def parse_instagram_url(url: str) -> ParsedContent:
    match = re.search(r"/(?:p|reel)/([A-Za-z0-9_-]+)", urlparse(url).path)
    if not match:
        raise ValidationError(f"Invalid Instagram URL format: {url}")
    post_id = match.group(1)
    return ParsedContent(
        title=f"Instagram Post {post_id}",
        description=f"Content from Instagram post {post_id}",
        platform="Instagram",
        original_url=url,
        attributes=_attrs(Platform="Instagram", Post_ID=post_id, Content_Type="Social Media Post"),
    )


def parse_twitter_url(url: str) -> ParsedContent:
    match = re.search(r"^/([^/]+)/status/(\d+)", urlparse(url).path)
    if not match:
        raise ValidationError(f"Invalid Twitter URL format: {url}")
    username, tweet_id = match.groups()
    return ParsedContent(
        title=f"Tweet by @{username}",
        description=f"Content from Twitter post {tweet_id}",
        platform="Twitter",
        original_url=url,
        creator=f"@{username}",
        attributes=_attrs(
            Platform="Twitter", Username=f"@{username}", Tweet_ID=tweet_id, Content_Type="Social Media Post"
        ),
    )


def parse_artstation_url(url: str) -> ParsedContent:
    match = re.search(r"/artwork/([A-Za-z0-9]+)", urlparse(url).path)
    if not match:
        raise ValidationError(f"Invalid ArtStation URL format: {url}")
    artwork_id = match.group(1)
    return ParsedContent(
        title=f"ArtStation Artwork {artwork_id}",
        description="Digital artwork from ArtStation",
        platform="ArtStation",
        original_url=url,
        media_type="image",
        attributes=_attrs(
            Platform="ArtStation", Artwork_ID=artwork_id, Content_Type="Digital Art", Medium="Digital"
        ),
    )


def parse_behance_url(url: str) -> ParsedContent:
    match = re.search(r"/gallery/(\d+)/([^/?#]+)", urlparse(url).path)
    if not match:
        raise ValidationError(f"Invalid Behance URL format: {url}")
    project_id, slug = match.groups()
    return ParsedContent(
        title=f"Behance Project: {slug.replace('-', ' ')}",
        description="Creative project from Behance",
        platform="Behance",
        original_url=url,
        attributes=_attrs(Platform="Behance", Project_ID=project_id, Content_Type="Creative Project"),
    )


def parse_youtube_url(url: str) -> ParsedContent:
    parsed = urlparse(url)
    video_id = ""
    if _host(url) == "youtu.be":
        video_id = parsed.path.lstrip("/").split("/")[0]
    elif parsed.path == "/watch":
        video_id = parse_qs(parsed.query).get("v", [""])[0]
    elif parsed.path.startswith("/shorts/"):
        video_id = parsed.path.split("/")[2]
    if not video_id:
        raise ValidationError(f"Invalid YouTube URL format: {url}")
    return ParsedContent(
        title=f"YouTube Video {video_id}",
        description="Video content from YouTube",
        platform="YouTube",
        original_url=url,
        image_url=f"https://img.youtube.com/vi/{video_id}/maxresdefault.jpg",
        media_url=url,
        media_type="video",
        attributes=_attrs(Platform="YouTube", Video_ID=video_id, Content_Type="Video", Medium="Video"),
    )


def parse_image_url(url: str, session: Optional[requests.Session] = None) -> ParsedContent:
    """Confirm via HEAD that the URL serves an image."""
    http = session or requests
    try:
        response = http.head(url, allow_redirects=True, timeout=HEAD_TIMEOUT_SECONDS)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise ValidationError(f"Could not reach {url}: {e}") from e

    content_type = response.headers.get("content-type", "")
    if not content_type.startswith("image/"):
        raise ValidationError(f"URL does not point to an image (content-type: {content_type or 'unknown'})")

    file_name = urlparse(url).path.rstrip("/").split("/")[-1] or "image"
    extension = file_name.rsplit(".", 1)[-1].upper() if "." in file_name else "Unknown"
    return ParsedContent(
        title=f"Image: {file_name}",
        description="Image file from URL",
        platform="Direct URL",
        original_url=url,
        image_url=url,
        media_type="image",
        attributes=_attrs(Content_Type="Image", File_Format=extension, Source="Direct URL"),
    )


_PLATFORM_PARSERS = {
    "instagram.com": parse_instagram_url,
    "twitter.com": parse_twitter_url,
    "x.com": parse_twitter_url,
    "artstation.com": parse_artstation_url,
    "behance.net": parse_behance_url,
    "youtube.com": parse_youtube_url,
    "m.youtube.com": parse_youtube_url,
    "youtu.be": parse_youtube_url,
}


def get_supported_platforms() -> List[str]:
    return sorted(set(_PLATFORM_PARSERS)) + ["direct image URLs"]


def parse_content_url(url: str, session: Optional[requests.Session] = None) -> ParsedContent:
    """
    Detect the platform from the URL host and parse it.

    Unknown hosts are treated as direct image links.
    """
    url = (url or "").strip()
    if urlparse(url).scheme not in ("http", "https") or not _host(url):
        raise ValidationError(f"Not an http(s) URL: {url!r}")

    parser = _PLATFORM_PARSERS.get(_host(url))
    if parser is not None:
        return parser(url)
    return parse_image_url(url, session=session)
