"""
ERC20 transfer tool for the story-build MCP server.
"""
from typing import Any, Optional, Union

from story_build.services import send_token
from mcp_server.agent import run_with_agent
from mcp_server.toon_wrapper import toon_response


def register_send_token(mcp):
    """Register the token transfer tool with the MCP server."""

    @mcp.tool()
    @toon_response
    async def story_send_token(
        token_address: str,
        destination: str,
        amount: Union[float, str],
        memo: Optional[str] = None,
        toon: Optional[bool] = None
    ) -> dict[str, Any]:
        """
        Send ERC20 tokens (WIP or any token contract) to another address.

        Args:
            token_address: Token contract, or "WIP"
            destination: Recipient address
            amount: Amount in token units (e.g. 10 or "2.5")
            memo: Note echoed back in the response

        Returns:
            transfer_details, token_info, transaction_info
        """
        return await run_with_agent(
            send_token, token_address=token_address, destination=destination, amount=amount, memo=memo
        )
