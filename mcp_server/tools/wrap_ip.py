"""
Wrap IP tool for the story-build MCP server.
"""
from typing import Any, Optional, Union

from story_build.services import wrap_ip
from mcp_server.agent import run_with_agent
from mcp_server.toon_wrapper import toon_response


def register_wrap_ip(mcp):
    """Register the wrap IP tool with the MCP server."""

    @mcp.tool()
    @toon_response
    async def story_wrap_ip(
        amount: Union[float, str],
        check_balance: bool = True,
        toon: Optional[bool] = None
    ) -> dict[str, Any]:
        """
        Wrap native IP into WIP, 1:1. License minting fees are paid in WIP.

        Args:
            amount: Amount of IP to wrap
            check_balance: Refuse up front when the IP balance is too low

        Returns:
            wrap_details, transaction_info, wip_balance
        """
        return await run_with_agent(wrap_ip, amount=amount, check_balance=check_balance)
