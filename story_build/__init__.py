"""
story-build - Story Protocol licensing tools for MCP clients.

Builds PIL license terms, registers and attaches them to IP assets, and mints
license tokens. The network and wallet are configured in
~/.story-build/config.json or the environment.
"""

__version__ = "0.1.0"

from story_build.errors import (
    StoryBuildError,
    ValidationError,
    InvalidQuantityError,
    ConfigurationError,
    ChainError,
    InsufficientAllowanceError,
    InsufficientBalanceError,
    PinataError,
    AmbiguousOverrideWarning,
)
from story_build.license_terms import LicenseTerms, BuildResult, build_license_terms
from story_build.fees import FeeQuote, quote

__all__ = [
    "__version__",
    "StoryBuildError",
    "ValidationError",
    "InvalidQuantityError",
    "ConfigurationError",
    "ChainError",
    "InsufficientAllowanceError",
    "InsufficientBalanceError",
    "PinataError",
    "AmbiguousOverrideWarning",
    "LicenseTerms",
    "BuildResult",
    "build_license_terms",
    "FeeQuote",
    "quote",
]
