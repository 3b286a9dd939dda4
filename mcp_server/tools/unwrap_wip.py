"""
Unwrap WIP tool for the story-build MCP server.
"""
from typing import Any, Optional, Union

from story_build.services import unwrap_wip
from mcp_server.agent import run_with_agent
from mcp_server.toon_wrapper import toon_response


def register_unwrap_wip(mcp):
    """Register the unwrap WIP tool with the MCP server."""

    @mcp.tool()
    @toon_response
    async def story_unwrap_wip(
        amount: Union[float, str],
        check_balance: bool = True,
        toon: Optional[bool] = None
    ) -> dict[str, Any]:
        """
        Unwrap WIP back to native IP, 1:1.

        Args:
            amount: Amount of WIP to unwrap
            check_balance: Refuse up front when the WIP balance is too low

        Returns:
            unwrap_details, transaction_info, ip_balance
        """
        return await run_with_agent(unwrap_wip, amount=amount, check_balance=check_balance)
