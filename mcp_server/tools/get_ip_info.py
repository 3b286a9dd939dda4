"""
IP info tool for the story-build MCP server.
"""
from typing import Any, Optional

from story_build.services import get_ip_info
from mcp_server.agent import run_with_agent
from mcp_server.toon_wrapper import toon_response


def register_get_ip_info(mcp):
    """Register the IP info tool with the MCP server."""

    @mcp.tool()
    @toon_response
    async def story_get_ip_info(ip_id: str, toon: Optional[bool] = None) -> dict[str, Any]:
        """
        Look up an IP asset's registration and attached license terms.

        Args:
            ip_id: IP asset address

        Returns:
            is_registered, attached_license_terms, is_licensable, explorer_url
        """
        return await run_with_agent(get_ip_info, ip_id=ip_id)
