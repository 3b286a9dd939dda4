"""
Parse content URL tool for the story-build MCP server.
"""
from typing import Any, Optional

from story_build.services import parse_url
from mcp_server.agent import run_service
from mcp_server.toon_wrapper import toon_response


def register_parse_content_url(mcp):
    """Register the parse content URL tool with the MCP server."""

    @mcp.tool()
    @toon_response
    async def story_parse_content_url(url: str, toon: Optional[bool] = None) -> dict[str, Any]:
        """
        Extract title, platform and media info from a content URL.

        Supports Instagram, Twitter/X, ArtStation, Behance, YouTube and
        direct image links.

        Args:
            url: http(s) URL of the content

        Returns:
            content (title, description, platform, image/media URLs, attributes)
        """
        return await run_service(parse_url, url)
