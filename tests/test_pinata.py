"""
Tests for the Pinata client. requests is mocked.
"""
from unittest.mock import MagicMock

import pytest
import requests

from story_build.config import StoryConfig
from story_build.errors import ConfigurationError
from story_build.pinata import PINATA_API_URL, PinataClient, PinataError, ipfs_uri


@pytest.fixture
def session():
    session = MagicMock()
    session.headers = {}
    session.request.return_value.json.return_value = {"IpfsHash": "bafytestcid"}
    return session


class TestPinataClient:

    def test_sets_bearer_token(self, session):
        PinataClient("secret-jwt", "https://gw.example", session=session)
        assert session.headers["Authorization"] == "Bearer secret-jwt"

    def test_upload_json_returns_cid(self, session):
        client = PinataClient("jwt", "https://gw.example", session=session)
        cid = client.upload_json({"title": "Art"}, "ip-metadata")
        assert cid == "bafytestcid"
        session.request.assert_called_once_with(
            "POST",
            f"{PINATA_API_URL}/pinning/pinJSONToIPFS",
            timeout=30,
            json={"pinataContent": {"title": "Art"}, "pinataMetadata": {"name": "ip-metadata"}},
        )

    def test_http_error_wrapped(self, session):
        session.request.return_value.raise_for_status.side_effect = requests.HTTPError("401 Unauthorized")
        client = PinataClient("bad", "https://gw.example", session=session)
        with pytest.raises(PinataError, match="401"):
            client.upload_json({}, "x")

    def test_gateway_url(self, session):
        client = PinataClient("jwt", "https://gw.example/", session=session)
        assert client.gateway_url("cid1") == "https://gw.example/ipfs/cid1"
        assert ipfs_uri("cid1") == "ipfs://cid1"

    def test_from_config_requires_jwt(self):
        with pytest.raises(ConfigurationError, match="PINATA_JWT"):
            PinataClient.from_config(StoryConfig())

    def test_from_config(self):
        client = PinataClient.from_config(StoryConfig(pinata_jwt="jwt", pinata_gateway="https://gw.example"))
        assert client.gateway == "https://gw.example"
        assert client.session.headers["Authorization"] == "Bearer jwt"
