"""
Exception types for story-build.

ValidationError subclasses ValueError so callers that only know about
builtin exceptions still catch bad input.
"""


class StoryBuildError(Exception):
    """Base class for all story-build errors."""


class ValidationError(StoryBuildError, ValueError):
    """Malformed or out-of-range input. Raised before any external call."""


class InvalidQuantityError(ValidationError):
    """Requested token quantity is not a positive integer."""


class ConfigurationError(StoryBuildError):
    """Missing or invalid configuration (wallet key, network, Pinata JWT)."""


class ChainError(StoryBuildError):
    """RPC failure, chain mismatch, or reverted transaction."""


class InsufficientAllowanceError(ChainError):
    """Payment token allowance is too low for the requested operation."""


class InsufficientBalanceError(ChainError):
    """Wallet balance cannot cover a transfer, wrap, or unwrap plus gas."""


class PinataError(StoryBuildError):
    """Pinata rejected an IPFS request or could not be reached."""


class AmbiguousOverrideWarning(UserWarning):
    """Free-text license description matched no rule, or conflicting rules."""
