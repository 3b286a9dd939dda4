"""Shortcut symbols for the protocol's payment tokens."""
from story_build.contracts import IP_TOKEN_ADDRESS, WIP_TOKEN_ADDRESS

TOKEN_SHORTCUTS = {
    "WIP": WIP_TOKEN_ADDRESS,
    "IP": IP_TOKEN_ADDRESS,
}


def resolve_token(token: str) -> str:
    """Map a shortcut symbol (case-insensitive) to its address; pass anything else through."""
    return TOKEN_SHORTCUTS.get(token.strip().upper(), token.strip())


def is_protocol_token(address: str) -> bool:
    return address.lower() in {a.lower() for a in TOKEN_SHORTCUTS.values()}
