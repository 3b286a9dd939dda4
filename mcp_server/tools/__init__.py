"""
MCP tools for story-build.

Each tool is in its own module for maintainability.
"""

from .create_license_terms import register_create_license_terms
from .preview_license_terms import register_preview_license_terms
from .attach_license import register_attach_license
from .mint_license import register_mint_license
from .get_wallet_info import register_get_wallet_info
from .validate_address import register_validate_address
from .check_allowance import register_check_allowance
from .approve_token import register_approve_token
from .send_native import register_send_native
from .send_token import register_send_token
from .wrap_ip import register_wrap_ip
from .unwrap_wip import register_unwrap_wip
from .get_token_info import register_get_token_info
from .get_account_balances import register_get_account_balances
from .get_ip_info import register_get_ip_info
from .register_ip import register_register_ip
from .mint_and_register_ip import register_mint_and_register_ip
from .parse_content_url import register_parse_content_url
from .prepare_ip_metadata import register_prepare_ip_metadata


def register_all_tools(mcp):
    """Register all story-build tools with the MCP server."""
    # Licensing
    register_create_license_terms(mcp)
    register_preview_license_terms(mcp)
    register_attach_license(mcp)
    register_mint_license(mcp)
    # Wallet and tokens
    register_get_wallet_info(mcp)
    register_validate_address(mcp)
    register_check_allowance(mcp)
    register_approve_token(mcp)
    register_send_native(mcp)
    register_send_token(mcp)
    register_wrap_ip(mcp)
    register_unwrap_wip(mcp)
    register_get_token_info(mcp)
    register_get_account_balances(mcp)
    # IP assets
    register_get_ip_info(mcp)
    register_register_ip(mcp)
    register_mint_and_register_ip(mcp)
    # Metadata
    register_parse_content_url(mcp)
    register_prepare_ip_metadata(mcp)


__all__ = ["register_all_tools"]
