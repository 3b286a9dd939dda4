"""
MCP server for story-build.

Provides tools for Story Protocol license terms, license tokens, wallets and
IP metadata.

Run with: python -m mcp_server.server
Or: story-build-mcp
"""
import logging
import sys

from dotenv import load_dotenv
from mcp.server import FastMCP

from mcp_server.tools import register_all_tools
from story_build.config import load_config
from story_build.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Initialize the MCP server using FastMCP (has .tool() decorator)
server = FastMCP("story-build")

# Alias for backwards compatibility with `mcp run`
mcp = server

register_all_tools(server)


def _check_configuration():
    """
    Fail-fast config check at startup.

    An unknown network aborts. A missing wallet key only warns: read-only
    tools (preview, validate address, parse URL) still work without one.
    """
    try:
        config = load_config()
    except ConfigurationError as e:
        print("=" * 60, file=sys.stderr)
        print("CONFIGURATION ERROR", file=sys.stderr)
        print("=" * 60, file=sys.stderr)
        print(str(e), file=sys.stderr)
        print("", file=sys.stderr)
        print("Set STORY_NETWORK to aeneid or mainnet,", file=sys.stderr)
        print("  or fix ~/.story-build/config.json", file=sys.stderr)
        print("=" * 60, file=sys.stderr)
        sys.exit(1)

    if not config.wallet_private_key:
        print("WALLET_PRIVATE_KEY is not set: transaction tools will fail until it is.", file=sys.stderr)
    logger.info("story-build MCP server on %s (%s)", config.network, config.network_info.rpc_url)


async def main_async():
    """Run the MCP server (async)."""
    _check_configuration()

    # stdout carries the MCP protocol; everything else goes to stderr
    await server.run_stdio_async()


def main():
    """Entry point for script installation."""
    import asyncio

    load_dotenv()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    asyncio.run(main_async())


if __name__ == "__main__":
    main()
