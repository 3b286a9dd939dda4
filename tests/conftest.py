"""
Pytest configuration for tests.

Isolates every test from the developer's ~/.story-build/config.json and
environment, and provides a StoryAgent whose web3 boundary is mocked.
"""
from unittest.mock import MagicMock

import pytest
from eth_account import Account
from web3 import Web3

from story_build.chain import StoryAgent
from story_build.config import StoryConfig, clear_config_cache

# Well-known throwaway key; never holds funds.
TEST_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
TX_HASH = "0x" + "11" * 32

STORY_ENV_VARS = (
    "STORY_NETWORK",
    "WALLET_PRIVATE_KEY",
    "STORY_RPC_URL",
    "PINATA_JWT",
    "PINATA_GATEWAY",
    "STORY_BUILD_TOON_OUTPUT",
)


def address(byte: str) -> str:
    """Checksummed address made of one repeated byte, e.g. address("ab")."""
    return Web3.to_checksum_address("0x" + byte * 20)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Point config at an empty temp dir and drop Story env vars."""
    for name in STORY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("STORY_BUILD_DATA_DIR", str(tmp_path))
    clear_config_cache()
    yield tmp_path
    clear_config_cache()


@pytest.fixture
def agent():
    """
    StoryAgent on aeneid with a mocked web3 and licensing client.

    Tests set agent.read / agent.simulate / agent.transact side effects as
    needed; connect() goes through the mocked web3 and reports chain 1315.
    """
    web3 = MagicMock()
    web3.eth.chain_id = 1315
    story_agent = StoryAgent(
        config=StoryConfig(network="aeneid", wallet_private_key=TEST_PRIVATE_KEY),
        web3=web3,
        account=Account.from_key(TEST_PRIVATE_KEY),
    )
    story_agent.read = MagicMock()
    story_agent.simulate = MagicMock()
    story_agent.transact = MagicMock(return_value={
        "tx_hash": TX_HASH,
        "receipt": {"status": 1, "blockNumber": 100, "gasUsed": 50000},
    })
    story_agent.licensing = MagicMock()
    return story_agent


def reads(values):
    """side_effect for agent.read that dispatches on the function name."""
    def _read(contract_address, abi, fn, *args):
        value = values[fn]
        return value(*args) if callable(value) else value
    return _read
