"""
Conversion between human-facing token amounts and on-chain base units.

All conversions go through Decimal. Floats are converted via their shortest
repr so that 1.1 means "1.1", not 1.100000000000000088817841970012523.
"""
from decimal import Decimal, InvalidOperation, localcontext
from typing import Union

from eth_utils import from_wei, to_wei

from story_build.errors import ValidationError

Amount = Union[int, float, str, Decimal]

WEI_PER_TOKEN = 10 ** 18
MAX_UINT256 = 2 ** 256 - 1


def to_decimal(amount: Amount, field: str = "amount") -> Decimal:
    """Coerce a user-supplied amount to a non-negative Decimal."""
    if isinstance(amount, bool):
        raise ValidationError(f"{field} must be a number, got a boolean")
    if isinstance(amount, float):
        amount = repr(amount)
    if isinstance(amount, str):
        amount = amount.strip()
    try:
        value = Decimal(amount)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field} must be a number, got {amount!r}") from None
    if not value.is_finite():
        raise ValidationError(f"{field} must be finite, got {amount!r}")
    if value < 0:
        raise ValidationError(f"{field} must be >= 0, got {amount}")
    return value


def parse_ether(amount: Amount, field: str = "amount") -> int:
    """
    Scale a decimal token amount to base units (10**18).

    Truncates toward zero only at the final integer boundary.

    Examples:
        parse_ether("1.5") -> 1500000000000000000
        parse_ether(0) -> 0
    """
    value = to_decimal(amount, field)
    if value == 0:
        return 0
    try:
        return to_wei(value, "ether")
    except ValueError as e:
        raise ValidationError(f"{field} is out of range: {e}") from e


def format_ether(wei: int) -> str:
    """Format base units as a plain decimal string without trailing zeros."""
    if int(wei) == 0:
        return "0"
    value = from_wei(int(wei), "ether")
    if value == value.to_integral_value():
        return str(value.quantize(Decimal(1)))
    return format(value.normalize(), "f")


def is_unlimited(allowance: int) -> bool:
    """Treat anything at or above half of uint256 max as an unlimited approval."""
    return allowance >= MAX_UINT256 // 2


def to_base_units(amount: Amount, decimals: int, field: str = "amount") -> int:
    """Scale a decimal amount by 10**decimals. Rejects digits beyond the token's precision."""
    value = to_decimal(amount, field)
    with localcontext() as ctx:
        ctx.prec = 100
        scaled = value.scaleb(decimals)
        fractional = scaled != scaled.to_integral_value()
    if fractional:
        raise ValidationError(f"{field} has more than {decimals} decimal places: {amount}")
    if scaled > MAX_UINT256:
        raise ValidationError(f"{field} is out of range: {amount}")
    return int(scaled)


def format_units(value: int, decimals: int) -> str:
    """format_ether for tokens with any number of decimals."""
    if int(value) == 0:
        return "0"
    with localcontext() as ctx:
        ctx.prec = 100
        amount = Decimal(int(value)).scaleb(-decimals)
        if amount == amount.to_integral_value():
            return str(amount.quantize(Decimal(1)))
        return format(amount.normalize(), "f")
