"""
Configuration for story-build.

Handles the network table, the JSON config file, and environment-based overrides.
Configuration is loaded from ~/.story-build/config.json with sensible defaults.

Secrets (wallet key, Pinata JWT) only ever come from the config file or the
environment. Nothing in the package embeds them.
"""

import json
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

from story_build.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Default data directory: ~/.story-build/
DEFAULT_DATA_DIR = Path.home() / ".story-build"
CONFIG_FILE_NAME = "config.json"

DEFAULT_NETWORK = "aeneid"
DEFAULT_PINATA_GATEWAY = "https://gateway.pinata.cloud"


@dataclass(frozen=True)
class NetworkInfo:
    """Static description of a Story Protocol network."""
    name: str
    chain_id: int
    rpc_url: str
    block_explorer: str
    protocol_explorer: str
    default_spg_nft_contract: Optional[str] = None


NETWORKS: Dict[str, NetworkInfo] = {
    "aeneid": NetworkInfo(
        name="aeneid",
        chain_id=1315,
        rpc_url="https://aeneid.storyrpc.io",
        block_explorer="https://aeneid.storyscan.io",
        protocol_explorer="https://aeneid.explorer.story.foundation",
        default_spg_nft_contract="0xc32A8a0FF3beDDDa58393d022aF433e78739FAbc",
    ),
    "mainnet": NetworkInfo(
        name="mainnet",
        chain_id=1514,
        rpc_url="https://mainnet.storyrpc.io",
        block_explorer="https://storyscan.io",
        protocol_explorer="https://explorer.story.foundation",
        default_spg_nft_contract="0x98971c660ac20880b60F86Cc3113eBd979eb3aAE",
    ),
}


@dataclass(frozen=True)
class StoryConfig:
    """Runtime configuration."""
    network: str = DEFAULT_NETWORK
    wallet_private_key: Optional[str] = None
    rpc_url: Optional[str] = None
    pinata_jwt: Optional[str] = None
    pinata_gateway: str = DEFAULT_PINATA_GATEWAY
    toon_output: bool = False

    @property
    def network_info(self) -> NetworkInfo:
        info = get_network_info(self.network)
        if self.rpc_url:
            return replace(info, rpc_url=self.rpc_url)
        return info

    def require_private_key(self) -> str:
        if not self.wallet_private_key:
            raise ConfigurationError(
                "WALLET_PRIVATE_KEY is required (set it in the environment or "
                f"in {get_config_path()})"
            )
        return self.wallet_private_key

    def require_pinata_jwt(self) -> str:
        if not self.pinata_jwt:
            raise ConfigurationError(
                "PINATA_JWT is required for IPFS uploads (set it in the environment "
                f"or in {get_config_path()})"
            )
        return self.pinata_jwt


# Module-level config cache
_config_cache: Optional[StoryConfig] = None


def get_network_info(network: str) -> NetworkInfo:
    """Look up a network by name. Raises ConfigurationError for unknown names."""
    try:
        return NETWORKS[network]
    except KeyError:
        raise ConfigurationError(
            f"Invalid network: {network}. Must be one of: {', '.join(NETWORKS)}"
        ) from None


def get_config_path() -> Path:
    """Get the path to the config file."""
    data_dir = Path(os.environ.get("STORY_BUILD_DATA_DIR", DEFAULT_DATA_DIR))
    return data_dir / CONFIG_FILE_NAME


def normalize_private_key(key: Optional[str]) -> Optional[str]:
    """Strip whitespace and ensure the 0x prefix."""
    if not key:
        return None
    key = key.strip()
    if not key.startswith("0x"):
        key = f"0x{key}"
    return key


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _load_file_config(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        # Log but continue with defaults
        logger.warning("Could not load config from %s: %s", path, e)
        return {}


def load_config() -> StoryConfig:
    """
    Load configuration from JSON file, with defaults for missing values.

    Environment variables override config file values:
    - STORY_BUILD_DATA_DIR: Override data directory
    - STORY_NETWORK: aeneid or mainnet
    - WALLET_PRIVATE_KEY: Signing key (0x prefix optional)
    - STORY_RPC_URL: Override the network's public RPC endpoint
    - PINATA_JWT: Pinata API token for IPFS uploads
    - PINATA_GATEWAY: Gateway used to build IPFS URLs
    - STORY_BUILD_TOON_OUTPUT: TOON-encode tool responses by default

    Returns:
        StoryConfig
    """
    global _config_cache

    if _config_cache is not None:
        return _config_cache

    data = _load_file_config(get_config_path())

    network = os.environ.get("STORY_NETWORK") or data.get("network") or DEFAULT_NETWORK
    get_network_info(network)

    toon_env = os.environ.get("STORY_BUILD_TOON_OUTPUT")
    toon_output = _parse_bool(toon_env) if toon_env is not None else bool(data.get("toon_output", False))

    config = StoryConfig(
        network=network,
        wallet_private_key=normalize_private_key(
            os.environ.get("WALLET_PRIVATE_KEY") or data.get("wallet_private_key")
        ),
        rpc_url=os.environ.get("STORY_RPC_URL") or data.get("rpc_url"),
        pinata_jwt=os.environ.get("PINATA_JWT") or data.get("pinata_jwt"),
        pinata_gateway=(
            os.environ.get("PINATA_GATEWAY") or data.get("pinata_gateway") or DEFAULT_PINATA_GATEWAY
        ).rstrip("/"),
        toon_output=toon_output,
    )

    _config_cache = config
    return config


def clear_config_cache() -> None:
    """Clear the config cache, forcing reload on next access."""
    global _config_cache
    _config_cache = None


def is_toon_output_enabled() -> bool:
    """Whether tool responses are TOON-encoded when the caller does not say."""
    return load_config().toon_output
