"""
Services for story-build.

Each service encapsulates one area of the Story Protocol workflow.
"""

from story_build.services.license_service import (
    preview_license_terms,
    create_license_terms,
    attach_license,
    mint_license,
    terms_details,
)
from story_build.services.wallet_service import (
    get_wallet_info,
    validate_address,
    check_allowance,
    approve_token,
)
from story_build.services.ip_service import (
    get_ip_info,
    register_ip,
    mint_and_register_ip,
)
from story_build.services.metadata_service import (
    parse_url,
    generate_metadata,
    build_content,
    pin_metadata,
    prepare_ip_metadata,
    metadata_hash,
)
from story_build.services.token_service import (
    send_native,
    send_token,
    wrap_ip,
    unwrap_wip,
    get_token_info,
    get_account_balances,
)

__all__ = [
    # License
    "preview_license_terms",
    "create_license_terms",
    "attach_license",
    "mint_license",
    "terms_details",
    # Wallet
    "get_wallet_info",
    "validate_address",
    "check_allowance",
    "approve_token",
    # IP assets
    "get_ip_info",
    "register_ip",
    "mint_and_register_ip",
    # Metadata
    "parse_url",
    "generate_metadata",
    "build_content",
    "pin_metadata",
    "prepare_ip_metadata",
    "metadata_hash",
    # Tokens
    "send_native",
    "send_token",
    "wrap_ip",
    "unwrap_wip",
    "get_token_info",
    "get_account_balances",
]
