"""
Minting fee quotes for license token purchases.

All amounts are base-unit integers. Python ints are arbitrary precision, so
uint256-sized fees multiply without truncation.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from story_build.errors import InvalidQuantityError, ValidationError
from story_build.units import format_ether

# Slippage buffer applied when the caller gives no ceiling: total // 10 (10%)
SLIPPAGE_DIVISOR = 10


@dataclass(frozen=True)
class FeeQuote:
    per_token_fee: int
    quantity: int
    total: int
    ceiling: int
    caller_max_fee: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "minting_fee_per_token": f"{format_ether(self.per_token_fee)} WIP",
            "quantity": self.quantity,
            "total_minting_fee": f"{format_ether(self.total)} WIP",
            "total_minting_fee_wei": str(self.total),
            "max_minting_fee": f"{format_ether(self.ceiling)} WIP",
            "max_minting_fee_wei": str(self.ceiling),
            "max_fee_source": "caller" if self.caller_max_fee is not None else "total + 10% buffer",
        }


def _check_amount(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer amount in base units, got {value!r}")
    if value < 0:
        raise ValidationError(f"{name} must be >= 0, got {value}")
    return value


def quote(per_token_fee: int, quantity: int, caller_max_fee: Optional[int] = None) -> FeeQuote:
    """
    Compute the total fee and the ceiling passed as maxMintingFee.

    The caller's ceiling is passed through verbatim, even below the total.
    The licensing module rejects the mint if it is too low.

    Raises:
        InvalidQuantityError: quantity is not an integer >= 1
        ValidationError: negative or non-integer fee
    """
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise InvalidQuantityError(f"quantity must be an integer >= 1, got {quantity!r}")
    per_token_fee = _check_amount(per_token_fee, "per_token_fee")

    total = per_token_fee * quantity
    if caller_max_fee is None:
        ceiling = total + total // SLIPPAGE_DIVISOR
    else:
        ceiling = _check_amount(caller_max_fee, "caller_max_fee")

    return FeeQuote(
        per_token_fee=per_token_fee,
        quantity=quantity,
        total=total,
        ceiling=ceiling,
        caller_max_fee=caller_max_fee,
    )
