"""
Connection to the Story Protocol chain.

StoryAgent owns the web3 client and the signing account. Writes always run
simulate -> sign/send -> wait-for-receipt in order; each step needs the
previous one's result.
"""

import logging
import re
from typing import Any, Dict, Optional

from eth_account import Account
from requests.exceptions import RequestException
from web3 import Web3
from web3.exceptions import ContractLogicError, TimeExhausted, Web3RPCError

from story_build.config import StoryConfig, load_config
from story_build.errors import ChainError, ValidationError

logger = logging.getLogger(__name__)

RECEIPT_TIMEOUT_SECONDS = 180

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def checksum(address: str, name: str = "address") -> str:
    """Validate a 0x-prefixed 20-byte hex address and return its checksum form."""
    if not isinstance(address, str) or not _ADDRESS_RE.match(address.strip()):
        raise ValidationError(f"{name} must be a 0x-prefixed 40 hex character address, got {address!r}")
    return Web3.to_checksum_address(address.strip().lower())


class StoryAgent:
    """Web3 client, signing account and network info for one network."""

    def __init__(
        self,
        config: Optional[StoryConfig] = None,
        web3: Optional[Web3] = None,
        account=None,
    ):
        self.config = config or load_config()
        self.network = self.config.network
        self.network_info = self.config.network_info
        self.web3 = web3 or Web3(Web3.HTTPProvider(self.network_info.rpc_url))
        self.account = account or Account.from_key(self.config.require_private_key())
        self._licensing = None

        logger.info("Story agent initialized on %s (%s)", self.network, self.address)

    @property
    def address(self) -> str:
        return self.account.address

    @property
    def licensing(self):
        """Lazily-built LicensingClient bound to this agent."""
        if self._licensing is None:
            from story_build.licensing import LicensingClient
            self._licensing = LicensingClient(self)
        return self._licensing

    @licensing.setter
    def licensing(self, client) -> None:
        self._licensing = client

    # ── Connectivity ─────────────────────────────────────────────────

    def connect(self) -> int:
        """
        Verify the RPC endpoint answers and serves the configured chain.

        Returns:
            The chain id reported by the RPC

        Raises:
            ChainError: RPC unreachable or serving a different chain
        """
        try:
            chain_id = self.web3.eth.chain_id
        except RequestException as e:
            raise ChainError(f"Failed to connect to {self.network_info.rpc_url}: {e}") from e

        if chain_id != self.network_info.chain_id:
            raise ChainError(
                f"RPC {self.network_info.rpc_url} serves chain {chain_id}, "
                f"expected {self.network_info.chain_id} ({self.network})"
            )
        logger.debug("Connected to Story Protocol %s (chain %s)", self.network, chain_id)
        return chain_id

    # ── Contract access ──────────────────────────────────────────────

    def contract(self, address: str, abi):
        return self.web3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)

    def read(self, address: str, abi, fn: str, *args) -> Any:
        """Call a view function."""
        return getattr(self.contract(address, abi).functions, fn)(*args).call()

    def simulate(self, address: str, abi, fn: str, *args, value: int = 0) -> Any:
        """eth_call a state-changing function from the wallet and return its result."""
        call = getattr(self.contract(address, abi).functions, fn)(*args)
        tx = {"from": self.address}
        if value:
            tx["value"] = value
        try:
            return call.call(tx)
        except ContractLogicError as e:
            raise ChainError(f"{fn} would revert: {e}") from e

    def transact(self, address: str, abi, fn: str, *args, value: int = 0) -> Dict[str, Any]:
        """
        Sign and send a contract call, then wait for its receipt.

        Returns:
            {"tx_hash": "0x...", "receipt": receipt}

        Raises:
            ChainError: reverted, or not mined within RECEIPT_TIMEOUT_SECONDS
        """
        call = getattr(self.contract(address, abi).functions, fn)(*args)
        tx = call.build_transaction({
            "from": self.address,
            "value": value,
            "nonce": self.web3.eth.get_transaction_count(self.address),
            "chainId": self.network_info.chain_id,
        })
        return self._sign_and_wait(tx, fn)

    def estimate_native_transfer(self, destination: str, value: int) -> Dict[str, int]:
        """Gas limit and price for a plain value transfer. Raises ChainError if the node rejects it."""
        try:
            gas = self.web3.eth.estimate_gas({"from": self.address, "to": destination, "value": value})
        except (ContractLogicError, Web3RPCError, ValueError) as e:
            raise ChainError(f"Transfer to {destination} would fail: {e}") from e
        return {"gas": gas, "gas_price": self.web3.eth.gas_price}

    def send_native(self, destination: str, value: int, gas: int, gas_price: int) -> Dict[str, Any]:
        """Send native IP to an address and wait for the receipt."""
        tx = {
            "from": self.address,
            "to": destination,
            "value": value,
            "gas": gas,
            "gasPrice": gas_price,
            "nonce": self.web3.eth.get_transaction_count(self.address),
            "chainId": self.network_info.chain_id,
        }
        return self._sign_and_wait(tx, "transfer")

    def _sign_and_wait(self, tx: Dict[str, Any], label: str) -> Dict[str, Any]:
        signed = self.account.sign_transaction(tx)
        tx_hash = Web3.to_hex(self.web3.eth.send_raw_transaction(signed.raw_transaction))
        logger.info("Sent %s transaction %s", label, tx_hash)

        try:
            receipt = self.web3.eth.wait_for_transaction_receipt(tx_hash, timeout=RECEIPT_TIMEOUT_SECONDS)
        except TimeExhausted as e:
            raise ChainError(f"{label} transaction {tx_hash} not mined after {RECEIPT_TIMEOUT_SECONDS}s") from e

        if receipt["status"] != 1:
            raise ChainError(f"{label} transaction {tx_hash} reverted (block {receipt['blockNumber']})")
        return {"tx_hash": tx_hash, "receipt": receipt}

    def get_balance(self, address: Optional[str] = None) -> int:
        """Native IP balance in base units."""
        return self.web3.eth.get_balance(address or self.address)

    def is_contract(self, address: str) -> bool:
        return len(self.web3.eth.get_code(address)) > 0

    # ── Explorer links ───────────────────────────────────────────────

    def tx_url(self, tx_hash: str) -> str:
        return f"{self.network_info.block_explorer}/tx/{tx_hash}"

    def address_url(self, address: str) -> str:
        return f"{self.network_info.block_explorer}/address/{address}"

    def token_url(self, token: str) -> str:
        return f"{self.network_info.block_explorer}/token/{token}"

    def ip_url(self, ip_id: str) -> str:
        return f"{self.network_info.protocol_explorer}/ipa/{ip_id}"
