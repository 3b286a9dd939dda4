"""
Tests for story-build configuration loading.
"""
import json

import pytest

from story_build.config import (
    NETWORKS,
    StoryConfig,
    clear_config_cache,
    get_config_path,
    get_network_info,
    is_toon_output_enabled,
    load_config,
    normalize_private_key,
)
from story_build.errors import ConfigurationError


def _write_config(data_dir, data):
    (data_dir / "config.json").write_text(json.dumps(data), encoding="utf-8")


class TestLoadConfig:

    def test_defaults_without_file_or_env(self):
        config = load_config()
        assert config.network == "aeneid"
        assert config.wallet_private_key is None
        assert config.pinata_jwt is None
        assert config.pinata_gateway == "https://gateway.pinata.cloud"
        assert config.toon_output is False
        assert config.network_info == NETWORKS["aeneid"]

    def test_config_path_follows_data_dir(self, isolated_config):
        assert get_config_path() == isolated_config / "config.json"

    def test_reads_file(self, isolated_config):
        _write_config(isolated_config, {
            "network": "mainnet",
            "wallet_private_key": "ab" * 32,
            "pinata_jwt": "jwt-from-file",
            "toon_output": True,
        })
        config = load_config()
        assert config.network == "mainnet"
        assert config.wallet_private_key == "0x" + "ab" * 32
        assert config.pinata_jwt == "jwt-from-file"
        assert config.toon_output is True

    def test_env_overrides_file(self, isolated_config, monkeypatch):
        _write_config(isolated_config, {"network": "mainnet", "pinata_jwt": "file"})
        monkeypatch.setenv("STORY_NETWORK", "aeneid")
        monkeypatch.setenv("PINATA_JWT", "env")
        monkeypatch.setenv("PINATA_GATEWAY", "https://my.gateway/")
        monkeypatch.setenv("STORY_BUILD_TOON_OUTPUT", "yes")
        config = load_config()
        assert config.network == "aeneid"
        assert config.pinata_jwt == "env"
        assert config.pinata_gateway == "https://my.gateway"
        assert config.toon_output is True

    def test_rpc_override(self, monkeypatch):
        monkeypatch.setenv("STORY_RPC_URL", "http://localhost:8545")
        info = load_config().network_info
        assert info.rpc_url == "http://localhost:8545"
        assert info.chain_id == 1315

    def test_invalid_json_falls_back_to_defaults(self, isolated_config):
        (isolated_config / "config.json").write_text("{not json", encoding="utf-8")
        assert load_config().network == "aeneid"

    def test_unknown_network(self, monkeypatch):
        monkeypatch.setenv("STORY_NETWORK", "sepolia")
        with pytest.raises(ConfigurationError, match="Invalid network"):
            load_config()

    def test_cached_until_cleared(self, monkeypatch):
        first = load_config()
        monkeypatch.setenv("STORY_NETWORK", "mainnet")
        assert load_config() is first
        clear_config_cache()
        assert load_config().network == "mainnet"

    def test_toon_output_flag(self, monkeypatch):
        assert is_toon_output_enabled() is False
        monkeypatch.setenv("STORY_BUILD_TOON_OUTPUT", "1")
        clear_config_cache()
        assert is_toon_output_enabled() is True


class TestStoryConfig:

    def test_require_private_key(self):
        with pytest.raises(ConfigurationError, match="WALLET_PRIVATE_KEY"):
            StoryConfig().require_private_key()
        assert StoryConfig(wallet_private_key="0xabc").require_private_key() == "0xabc"

    def test_require_pinata_jwt(self):
        with pytest.raises(ConfigurationError, match="PINATA_JWT"):
            StoryConfig().require_pinata_jwt()

    def test_network_info_by_name(self):
        assert get_network_info("mainnet").chain_id == 1514
        assert get_network_info("aeneid").chain_id == 1315

    @pytest.mark.parametrize("key,expected", [
        ("abc", "0xabc"),
        ("  0xabc\n", "0xabc"),
        ("", None),
        (None, None),
    ])
    def test_normalize_private_key(self, key, expected):
        assert normalize_private_key(key) == expected
