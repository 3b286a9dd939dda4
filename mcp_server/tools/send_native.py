"""
Native IP transfer tool for the story-build MCP server.
"""
from typing import Any, Optional, Union

from story_build.services import send_native
from mcp_server.agent import run_with_agent
from mcp_server.toon_wrapper import toon_response


def register_send_native(mcp):
    """Register the native transfer tool with the MCP server."""

    @mcp.tool()
    @toon_response
    async def story_send_native(
        destination: str,
        amount: Union[float, str],
        memo: Optional[str] = None,
        toon: Optional[bool] = None
    ) -> dict[str, Any]:
        """
        Send native IP (the gas token) to another address.

        Args:
            destination: Recipient address
            amount: Amount of IP (e.g. 0.5 or "0.5")
            memo: Note echoed back in the response

        Returns:
            transfer_details (amount, total cost with gas), transaction_info
        """
        return await run_with_agent(send_native, destination=destination, amount=amount, memo=memo)
