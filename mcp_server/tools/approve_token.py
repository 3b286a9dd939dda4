"""
Approve token tool for the story-build MCP server.
"""
from typing import Any, Optional, Union

from story_build.services import approve_token
from mcp_server.agent import run_with_agent
from mcp_server.toon_wrapper import toon_response


def register_approve_token(mcp):
    """Register the approve token tool with the MCP server."""

    @mcp.tool()
    @toon_response
    async def story_approve_token(
        token_address: str,
        spender: str,
        amount: Optional[Union[float, str]] = None,
        unlimited: bool = False,
        toon: Optional[bool] = None
    ) -> dict[str, Any]:
        """
        Approve a spender to move your tokens.

        No transaction is sent when the current allowance already covers a
        finite amount.

        Args:
            token_address: ERC20 address, or "WIP" / "IP"
            spender: Spender contract
            amount: Amount in token units (e.g. 10 or "2.5"); required unless unlimited
            unlimited: Approve the maximum uint256

        Returns:
            approval_details and, when a transaction was sent, transaction_info
        """
        return await run_with_agent(
            approve_token,
            token_address=token_address,
            spender=spender,
            amount=amount,
            unlimited=unlimited,
        )
