"""
Pinata client for pinning JSON metadata to IPFS.

The JWT comes from StoryConfig (PINATA_JWT); nothing here holds credentials.
"""

import logging
from typing import Any, Dict, Optional

import requests

from story_build.config import StoryConfig, load_config
from story_build.errors import PinataError

logger = logging.getLogger(__name__)

PINATA_API_URL = "https://api.pinata.cloud"
REQUEST_TIMEOUT_SECONDS = 30


class PinataClient:
    def __init__(self, jwt: str, gateway: str, session: Optional[requests.Session] = None):
        self.gateway = gateway.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {jwt}"})

    @classmethod
    def from_config(cls, config: Optional[StoryConfig] = None) -> "PinataClient":
        config = config or load_config()
        return cls(config.require_pinata_jwt(), config.pinata_gateway)

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            response = self.session.request(
                method, f"{PINATA_API_URL}{path}", timeout=REQUEST_TIMEOUT_SECONDS, **kwargs
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise PinataError(f"Pinata {method} {path} failed: {e}") from e
        return response.json()

    def upload_json(self, data: Dict[str, Any], name: str) -> str:
        """Pin a JSON document. Returns its CID."""
        body = self._request(
            "POST",
            "/pinning/pinJSONToIPFS",
            json={"pinataContent": data, "pinataMetadata": {"name": name}},
        )
        cid = body["IpfsHash"]
        logger.info("Pinned %s to IPFS as %s", name, cid)
        return cid

    def gateway_url(self, cid: str) -> str:
        return f"{self.gateway}/ipfs/{cid}"


def ipfs_uri(cid: str) -> str:
    return f"ipfs://{cid}"
