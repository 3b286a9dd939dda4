"""
Validate address tool for the story-build MCP server.
"""
from typing import Any, Optional

from story_build.services import validate_address
from mcp_server.toon_wrapper import toon_response


def register_validate_address(mcp):
    """Register the validate address tool with the MCP server."""

    @mcp.tool()
    @toon_response
    async def story_validate_address(address: str, toon: Optional[bool] = None) -> dict[str, Any]:
        """
        Check an address's format and EIP-55 checksum. No network call.

        Args:
            address: 0x-prefixed address

        Returns:
            is_valid, checksum_address, has_checksum, is_zero_address,
            is_protocol_token (and reason when invalid)
        """
        return validate_address(address)
