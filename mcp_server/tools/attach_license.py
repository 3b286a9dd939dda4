"""
Attach license tool for the story-build MCP server.
"""
from typing import Any, Optional

from story_build.services import attach_license
from mcp_server.agent import run_with_agent
from mcp_server.toon_wrapper import toon_response


def register_attach_license(mcp):
    """Register the attach license tool with the MCP server."""

    @mcp.tool()
    @toon_response
    async def story_attach_license(
        ip_id: str,
        license_terms_id: int,
        toon: Optional[bool] = None
    ) -> dict[str, Any]:
        """
        Attach registered license terms to an IP asset you own.

        Built-in PIL flavors: 1 Non-Commercial Social Remixing,
        2 Commercial Use, 3 Commercial Remix. Any custom id from
        story_create_license_terms works too.

        Args:
            ip_id: IP asset address
            license_terms_id: Registered license terms id

        Returns:
            attachment_info, transaction_info, license_terms_details,
            monetization_info and next_steps
        """
        return await run_with_agent(attach_license, ip_id=ip_id, license_terms_id=license_terms_id)
