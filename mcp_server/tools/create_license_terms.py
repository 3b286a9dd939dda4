"""
Create license terms tool for the story-build MCP server.
"""
from typing import Any, Optional, Union

from story_build.services import create_license_terms
from mcp_server.agent import run_with_agent
from mcp_server.toon_wrapper import toon_response


def register_create_license_terms(mcp):
    """Register the create license terms tool with the MCP server."""

    @mcp.tool()
    @toon_response
    async def story_create_license_terms(
        license_type: str = "custom",
        description: Optional[str] = None,
        commercial_use: Optional[bool] = None,
        commercial_attribution: Optional[bool] = None,
        derivatives_allowed: Optional[bool] = None,
        derivatives_attribution: Optional[bool] = None,
        derivatives_approval: Optional[bool] = None,
        derivatives_reciprocal: Optional[bool] = None,
        transferable: Optional[bool] = None,
        minting_fee: Optional[Union[float, str]] = None,
        commercial_rev_share: Optional[int] = None,
        commercial_rev_ceiling: Optional[int] = None,
        derivative_rev_ceiling: Optional[int] = None,
        expiration: Optional[int] = None,
        terms_uri: Optional[str] = None,
        toon: Optional[bool] = None
    ) -> dict[str, Any]:
        """
        Create and register PIL license terms on Story Protocol.

        Presets: "custom" (default), "commercial_remix", "non_commercial",
        "commercial_use". On the custom preset a plain-English description
        can override parameters, e.g. "no derivatives, 10% royalty, 5 WIP".
        Identical terms already on-chain resolve to their existing id.

        Args:
            license_type: Preset name
            description: Natural-language overrides (custom preset only)
            commercial_use: Allow commercial use
            commercial_attribution: Require attribution for commercial use
            derivatives_allowed: Allow derivative works
            derivatives_attribution: Require attribution on derivatives
            derivatives_approval: Licensor must approve derivatives
            derivatives_reciprocal: Derivatives must carry the same terms
            transferable: License tokens can be transferred
            minting_fee: Fee per license token in WIP (e.g. 0.5 or "0.5")
            commercial_rev_share: Revenue share percent (0-100)
            commercial_rev_ceiling: Commercial revenue ceiling
            derivative_rev_ceiling: Derivative revenue ceiling
            expiration: Unix timestamp, 0 for never
            terms_uri: Off-chain license text URI

        Returns:
            license_terms (id, description), transaction_info, terms_details,
            overrides_applied and next_steps
        """
        return await run_with_agent(
            create_license_terms,
            license_type=license_type,
            description=description,
            commercial_use=commercial_use,
            commercial_attribution=commercial_attribution,
            derivatives_allowed=derivatives_allowed,
            derivatives_attribution=derivatives_attribution,
            derivatives_approval=derivatives_approval,
            derivatives_reciprocal=derivatives_reciprocal,
            transferable=transferable,
            minting_fee=minting_fee,
            commercial_rev_share=commercial_rev_share,
            commercial_rev_ceiling=commercial_rev_ceiling,
            derivative_rev_ceiling=derivative_rev_ceiling,
            expiration=expiration,
            terms_uri=terms_uri,
        )
