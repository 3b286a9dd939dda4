"""
Preview license terms tool for the story-build MCP server.
"""
from typing import Any, Optional, Union

from story_build.services import preview_license_terms
from mcp_server.toon_wrapper import toon_response


def register_preview_license_terms(mcp):
    """Register the preview license terms tool with the MCP server."""

    @mcp.tool()
    @toon_response
    async def story_preview_license_terms(
        license_type: str = "custom",
        description: Optional[str] = None,
        commercial_use: Optional[bool] = None,
        derivatives_allowed: Optional[bool] = None,
        minting_fee: Optional[Union[float, str]] = None,
        commercial_rev_share: Optional[int] = None,
        expiration: Optional[int] = None,
        toon: Optional[bool] = None
    ) -> dict[str, Any]:
        """
        Show the license terms a create call would register, without a transaction.

        Accepts the same presets and description overrides as
        story_create_license_terms. Needs no wallet or network.

        Returns:
            summary, terms_details, license_terms (raw) and overrides_applied
        """
        return preview_license_terms(
            license_type=license_type,
            description=description,
            commercial_use=commercial_use,
            derivatives_allowed=derivatives_allowed,
            minting_fee=minting_fee,
            commercial_rev_share=commercial_rev_share,
            expiration=expiration,
        )
