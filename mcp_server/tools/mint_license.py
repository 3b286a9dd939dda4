"""
Mint license tool for the story-build MCP server.
"""
from typing import Any, Optional, Union

from story_build.services import mint_license
from mcp_server.agent import run_with_agent
from mcp_server.toon_wrapper import toon_response


def register_mint_license(mcp):
    """Register the mint license tool with the MCP server."""

    @mcp.tool()
    @toon_response
    async def story_mint_license(
        licensor_ip_id: str,
        license_terms_id: int,
        amount: int = 1,
        receiver: Optional[str] = None,
        max_minting_fee: Optional[Union[float, str]] = None,
        max_revenue_share: int = 100,
        toon: Optional[bool] = None
    ) -> dict[str, Any]:
        """
        Mint license tokens from an IP asset with attached terms.

        Paid licenses are charged in WIP by the royalty module, so the wallet
        needs a WIP allowance for it first (story_approve_token with
        token_address="WIP").

        Args:
            licensor_ip_id: IP asset issuing the licenses
            license_terms_id: Terms attached to that IP
            amount: Number of tokens to mint (>= 1)
            receiver: Recipient address, defaults to your wallet
            max_minting_fee: Highest total fee accepted in WIP; defaults to total + 10%
            max_revenue_share: Highest revenue share percent accepted

        Returns:
            minting_info (token ids), transaction_info, cost_breakdown,
            balance_check, license_terms_summary and usage_rights
        """
        return await run_with_agent(
            mint_license,
            licensor_ip_id=licensor_ip_id,
            license_terms_id=license_terms_id,
            amount=amount,
            receiver=receiver,
            max_minting_fee=max_minting_fee,
            max_revenue_share=max_revenue_share,
        )
