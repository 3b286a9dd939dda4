"""
Response shaping for MCP tool results.

Service dicts can carry web3 values (AttributeDict receipts, HexBytes hashes,
uint256 ids) and Decimal amounts. Every tool result goes through `to_wire`
so it serializes the same way as JSON or TOON; TOON output is returned as
MCP TextContent.
"""
import inspect
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Callable, Dict, Optional

from web3 import Web3

from story_build.config import is_toon_output_enabled

# Largest integer a JSON client can hold exactly (2**53 - 1). Base-unit
# amounts above it are sent as strings.
MAX_SAFE_INTEGER = 2 ** 53 - 1

# mcp.types and toons are imported on first use so service tests never need them
_TextContent = None
_toon_encode = None


def _get_text_content_class():
    global _TextContent
    if _TextContent is None:
        from mcp.types import TextContent
        _TextContent = TextContent
    return _TextContent


def _get_toon_encoder():
    """Lazy-load toons.dumps. Raises ImportError if toons is missing."""
    global _toon_encode
    if _toon_encode is None:
        from toons import dumps
        _toon_encode = dumps
    return _toon_encode


def to_wire(value: Any) -> Any:
    """
    Convert a service result into plain JSON/TOON values.

    - Mappings (including web3 AttributeDict) become dicts with str keys
    - tuples and lists become lists
    - bytes (HexBytes) become 0x hex strings
    - Decimal becomes a plain decimal string ("1.5", never "1.5E+0")
    - ints beyond MAX_SAFE_INTEGER become strings
    """
    if isinstance(value, Mapping):
        return {str(k): to_wire(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_wire(v) for v in value]
    if isinstance(value, (bytes, bytearray)):
        return Web3.to_hex(bytes(value))
    if isinstance(value, Decimal):
        return format(value.normalize(), "f") if value else "0"
    if isinstance(value, int) and not isinstance(value, bool) and abs(value) > MAX_SAFE_INTEGER:
        return str(value)
    return value


def encode_response(result: Dict[str, Any]):
    """Encode a response dict as a single TOON TextContent block."""
    TC = _get_text_content_class()
    return [TC(type="text", text=_get_toon_encoder()(to_wire(result)))]


def _schema_signature(func: Callable) -> inspect.Signature:
    # FastMCP derives the input schema from __signature__; without the return
    # annotation it does not validate the TextContent list against dict.
    return inspect.signature(func).replace(return_annotation=inspect.Signature.empty)


def toon_response(func: Callable) -> Callable:
    """
    Decorator for tool handlers: normalizes the result and TOON-encodes it
    when asked.

    Callers may pass `toon=True/False`; when omitted, STORY_BUILD_TOON_OUTPUT
    (or the config file) decides. The tool declares `toon` only so it shows
    up in the schema; the handler itself never receives it.

    Usage:
        @mcp.tool()
        @toon_response
        async def story_tool(ip_id: str, toon: Optional[bool] = None) -> dict[str, Any]:
            return {"status": "success"}
    """
    async def tool(*args, toon: Optional[bool] = None, **kwargs):
        result = to_wire(await func(*args, **kwargs))
        if not isinstance(result, dict):
            return result
        if is_toon_output_enabled() if toon is None else toon:
            return encode_response(result)
        return result

    for attr in ("__module__", "__name__", "__qualname__", "__doc__"):
        setattr(tool, attr, getattr(func, attr))
    tool.__annotations__ = {k: v for k, v in func.__annotations__.items() if k != "return"}
    tool.__signature__ = _schema_signature(func)
    return tool
