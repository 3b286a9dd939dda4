"""
Tests for the MCP layer: response shaping, TOON encoding, tool registration
and off-loop service dispatch.
"""
import asyncio
import threading
from decimal import Decimal
from unittest.mock import MagicMock, patch

from mcp.server import FastMCP
from mcp.types import TextContent
from web3.datastructures import AttributeDict

from mcp_server.agent import run_service, run_with_agent
from mcp_server.tools import register_all_tools
from mcp_server.toon_wrapper import MAX_SAFE_INTEGER, to_wire, toon_response

EXPECTED_TOOLS = {
    "story_create_license_terms",
    "story_preview_license_terms",
    "story_attach_license",
    "story_mint_license",
    "story_get_wallet_info",
    "story_validate_address",
    "story_check_allowance",
    "story_approve_token",
    "story_send_native",
    "story_send_token",
    "story_wrap_ip",
    "story_unwrap_wip",
    "story_get_token_info",
    "story_get_account_balances",
    "story_get_ip_info",
    "story_register_ip",
    "story_mint_and_register_ip",
    "story_parse_content_url",
    "story_prepare_ip_metadata",
}


@toon_response
async def _sample_tool(name: str, toon=None) -> dict:
    """Sample tool."""
    return {"name": name, "terms": [{"id": 1, "fee": "1 WIP"}]}


@toon_response
async def _chain_tool(toon=None) -> dict:
    return {
        "fee": Decimal("1.50"),
        "fee_wei": 1500000000000000000,
        "receipt": AttributeDict({"blockNumber": 12, "transactionHash": b"\xab" * 32}),
        "token_ids": (7, 8),
    }


class TestToWire:

    def test_decimal_is_plain_string(self):
        assert to_wire(Decimal("1.50")) == "1.5"
        assert to_wire(Decimal("1E+2")) == "100"
        assert to_wire(Decimal("0E-18")) == "0"

    def test_base_unit_ints_become_strings(self):
        assert to_wire(10 ** 18) == "1000000000000000000"
        assert to_wire(MAX_SAFE_INTEGER) == MAX_SAFE_INTEGER
        assert to_wire(1315) == 1315

    def test_bools_untouched(self):
        assert to_wire({"ok": True}) == {"ok": True}

    def test_web3_values(self):
        result = to_wire(AttributeDict({"hash": b"\x01\x02", "ids": (1, 2)}))
        assert result == {"hash": "0x0102", "ids": [1, 2]}


class TestToonResponse:

    def test_plain_dict_by_default(self):
        assert asyncio.run(_sample_tool(name="x")) == {"name": "x", "terms": [{"id": 1, "fee": "1 WIP"}]}

    def test_encodes_when_requested(self):
        result = asyncio.run(_sample_tool(name="x", toon=True))
        assert len(result) == 1
        assert isinstance(result[0], TextContent)
        assert "name" in result[0].text

    def test_config_default(self, monkeypatch):
        monkeypatch.setenv("STORY_BUILD_TOON_OUTPUT", "true")
        assert isinstance(asyncio.run(_sample_tool(name="x")), list)
        assert isinstance(asyncio.run(_sample_tool(name="x", toon=False)), dict)

    def test_signature_drops_return_annotation(self):
        assert "return" not in _sample_tool.__annotations__
        assert _sample_tool.__name__ == "_sample_tool"
        assert _sample_tool.__doc__ == "Sample tool."

    def test_chain_values_normalized(self):
        result = asyncio.run(_chain_tool())
        assert result == {
            "fee": "1.5",
            "fee_wei": "1500000000000000000",
            "receipt": {"blockNumber": 12, "transactionHash": "0x" + "ab" * 32},
            "token_ids": [7, 8],
        }

    def test_chain_values_toon_encoded(self):
        text = asyncio.run(_chain_tool(toon=True))[0].text
        assert "1500000000000000000" in text
        assert "0x" + "ab" * 32 in text


class TestServiceDispatch:

    def test_run_service_passes_arguments(self):
        assert asyncio.run(run_service(lambda a, b=0: a + b, 1, b=2)) == 3

    def test_run_with_agent_builds_agent_in_worker(self):
        agent = MagicMock()
        with patch("mcp_server.agent.get_agent", return_value=agent):
            result = asyncio.run(run_with_agent(lambda a, x: (a, x), x=5))
        assert result == (agent, 5)

    def test_tool_calls_run_concurrently(self):
        # Each call blocks until the other one arrives; run one at a time,
        # the barrier times out and the calls fail.
        barrier = threading.Barrier(2, timeout=5)

        def blocking_wallet_info(agent):
            barrier.wait()
            return {"status": "success"}

        server = FastMCP("story-build-test")
        register_all_tools(server)

        async def two_calls():
            return await asyncio.gather(
                server.call_tool("story_get_wallet_info", {}),
                server.call_tool("story_get_wallet_info", {}),
            )

        with patch("mcp_server.agent.get_agent", return_value=MagicMock()), \
                patch("mcp_server.tools.get_wallet_info.get_wallet_info", blocking_wallet_info):
            asyncio.run(two_calls())

        assert not barrier.broken


class TestToolRegistration:

    def test_registers_every_tool(self):
        server = FastMCP("story-build-test")
        register_all_tools(server)
        names = {tool.name for tool in asyncio.run(server.list_tools())}
        assert names == EXPECTED_TOOLS

    def test_validate_address_tool_needs_no_wallet(self):
        server = FastMCP("story-build-test")
        register_all_tools(server)
        with patch("mcp_server.agent.StoryAgent") as agent_cls:
            asyncio.run(server.call_tool("story_validate_address", {"address": "0x" + "ab" * 20}))
        agent_cls.assert_not_called()
