"""
Programmable IP License (PIL) terms construction.

build_license_terms() turns a preset name plus caller parameters (and, for the
custom preset, an optional natural-language description) into an immutable
LicenseTerms record ready for the PIL license template.

Parameter handling happens in three layers, lowest first:
    preset defaults -> caller parameters -> description overrides
and then the preset's forced fields are applied on top. The resulting record
always satisfies:
    - royalty_policy is set iff commercial_use and commercial_rev_share > 0
    - commercial_attribution is False when commercial_use is False
    - derivative flags are False when derivatives_allowed is False
commercial_rev_share is never zeroed here; the licensing template decides what
a revenue share on a non-commercial license means.
"""

import logging
import re
import warnings
from dataclasses import asdict, dataclass, field
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from story_build.contracts import (
    COMMERCIAL_REMIX_URI,
    NON_COMMERCIAL_URI,
    PIL_TERMS_COMPONENTS,
    ROYALTY_POLICY_LAP,
    WIP_TOKEN_ADDRESS,
    ZERO_ADDRESS,
)
from story_build.errors import AmbiguousOverrideWarning, ValidationError
from story_build.units import format_ether, parse_ether, to_decimal

logger = logging.getLogger(__name__)

CUSTOM = "custom"
COMMERCIAL_REMIX = "commercial_remix"
NON_COMMERCIAL = "non_commercial"
COMMERCIAL_USE = "commercial_use"

PRESETS = (CUSTOM, COMMERCIAL_REMIX, NON_COMMERCIAL, COMMERCIAL_USE)

# On-chain revenue share is a uint32 where 100% == 100_000_000
REVENUE_SHARE_SCALE = 10 ** 6

BOOL_PARAMS = (
    "commercial_use",
    "commercial_attribution",
    "derivatives_allowed",
    "derivatives_attribution",
    "derivatives_approval",
    "derivatives_reciprocal",
    "transferable",
)
INT_PARAMS = ("commercial_rev_ceiling", "derivative_rev_ceiling", "expiration")

# Defaults for the custom and commercial_use presets
PARAM_DEFAULTS: Dict[str, Any] = {
    "commercial_use": True,
    "commercial_attribution": True,
    "derivatives_allowed": True,
    "derivatives_attribution": True,
    "derivatives_approval": False,
    "derivatives_reciprocal": True,
    "transferable": True,
    "minting_fee": Decimal(1),
    "commercial_rev_share": 0,
    "commercial_rev_ceiling": 0,
    "derivative_rev_ceiling": 0,
    "expiration": 0,
    "terms_uri": "",
}

_TRUE_STRINGS = ("true", "yes", "1", "on")
_FALSE_STRINGS = ("false", "no", "0", "off")


@dataclass(frozen=True)
class LicenseTerms:
    """Canonical PIL terms record. Amounts are base units, rev share is a percentage."""
    transferable: bool
    royalty_policy: Optional[str]
    default_minting_fee: int
    expiration: int
    commercial_use: bool
    commercial_attribution: bool
    commercial_rev_share: Union[int, Decimal]
    commercial_rev_ceiling: int
    derivatives_allowed: bool
    derivatives_attribution: bool
    derivatives_approval: bool
    derivatives_reciprocal: bool
    derivative_rev_ceiling: int
    currency: Optional[str]
    uri: str = ""
    commercializer_checker: str = ZERO_ADDRESS
    commercializer_checker_data: str = "0x"

    def to_contract_tuple(self) -> Tuple[Any, ...]:
        """Encode in PILTerms struct order for the license template."""
        values = {
            "transferable": self.transferable,
            "royaltyPolicy": self.royalty_policy or ZERO_ADDRESS,
            "defaultMintingFee": self.default_minting_fee,
            "expiration": self.expiration,
            "commercialUse": self.commercial_use,
            "commercialAttribution": self.commercial_attribution,
            "commercializerChecker": self.commercializer_checker,
            "commercializerCheckerData": bytes.fromhex(self.commercializer_checker_data[2:]),
            "commercialRevShare": int(Decimal(self.commercial_rev_share) * REVENUE_SHARE_SCALE),
            "commercialRevCeiling": self.commercial_rev_ceiling,
            "derivativesAllowed": self.derivatives_allowed,
            "derivativesAttribution": self.derivatives_attribution,
            "derivativesApproval": self.derivatives_approval,
            "derivativesReciprocal": self.derivatives_reciprocal,
            "derivativeRevCeiling": self.derivative_rev_ceiling,
            "currency": self.currency or ZERO_ADDRESS,
            "uri": self.uri,
        }
        return tuple(values[name] for name, _ in PIL_TERMS_COMPONENTS)

    @classmethod
    def from_contract_tuple(cls, values) -> "LicenseTerms":
        """Decode a PILTerms tuple as returned by the license template."""
        raw = dict(zip((name for name, _ in PIL_TERMS_COMPONENTS), values))

        def _address(value: str) -> Optional[str]:
            return None if int(value, 16) == 0 else value

        rev_share = Decimal(raw["commercialRevShare"]) / REVENUE_SHARE_SCALE
        checker_data = raw["commercializerCheckerData"]
        if isinstance(checker_data, (bytes, bytearray)):
            checker_data = "0x" + bytes(checker_data).hex()

        return cls(
            transferable=raw["transferable"],
            royalty_policy=_address(raw["royaltyPolicy"]),
            default_minting_fee=raw["defaultMintingFee"],
            expiration=raw["expiration"],
            commercial_use=raw["commercialUse"],
            commercial_attribution=raw["commercialAttribution"],
            commercial_rev_share=int(rev_share) if rev_share == rev_share.to_integral_value() else rev_share,
            commercial_rev_ceiling=raw["commercialRevCeiling"],
            derivatives_allowed=raw["derivativesAllowed"],
            derivatives_attribution=raw["derivativesAttribution"],
            derivatives_approval=raw["derivativesApproval"],
            derivatives_reciprocal=raw["derivativesReciprocal"],
            derivative_rev_ceiling=raw["derivativeRevCeiling"],
            currency=_address(raw["currency"]),
            uri=raw["uri"],
            commercializer_checker=raw["commercializerChecker"],
            commercializer_checker_data=checker_data,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if isinstance(self.commercial_rev_share, Decimal):
            data["commercial_rev_share"] = str(self.commercial_rev_share)
        return data


@dataclass(frozen=True)
class BuildResult:
    """LicenseTerms plus the human-facing parameters they were built from."""
    preset: str
    terms: LicenseTerms
    params: Dict[str, Any]
    overrides: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def summary(self) -> str:
        fee = format_ether(self.terms.default_minting_fee)
        share = self.terms.commercial_rev_share
        if self.preset == COMMERCIAL_REMIX:
            return f"Commercial Remix ({fee} WIP fee, {share}% revenue share)"
        if self.preset == NON_COMMERCIAL:
            return "Non-Commercial Social Remixing"
        if self.preset == COMMERCIAL_USE:
            return f"Commercial Use Only ({fee} WIP fee, {share}% revenue share)"
        return (
            f"Custom License (Commercial: {self.terms.commercial_use}, "
            f"Derivatives: {self.terms.derivatives_allowed})"
        )


# ── Parameter coercion ───────────────────────────────────────────────

def to_bool(value: Any, name: str) -> bool:
    """Accept real booleans and the usual string spellings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ValidationError(f"{name} must be a boolean, got {value!r}")


def to_non_negative_int(value: Any, name: str) -> int:
    number = to_decimal(value, name)
    if number != number.to_integral_value():
        raise ValidationError(f"{name} must be a whole number, got {value}")
    return int(number)


def to_rev_share(value: Any, name: str = "commercial_rev_share") -> int:
    share = to_non_negative_int(value, name)
    if share > 100:
        raise ValidationError(f"{name} must be between 0 and 100, got {share}")
    return share


def normalize_params(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Validate and coerce caller parameters.

    Keys with a None value are treated as absent so that preset defaults apply.
    Unknown keys are rejected.
    """
    normalized: Dict[str, Any] = {}
    for name, value in (params or {}).items():
        if name not in PARAM_DEFAULTS:
            raise ValidationError(
                f"Unknown license parameter: {name}. Valid parameters: {', '.join(PARAM_DEFAULTS)}"
            )
        if value is None:
            continue
        if name in BOOL_PARAMS:
            normalized[name] = to_bool(value, name)
        elif name in INT_PARAMS:
            normalized[name] = to_non_negative_int(value, name)
        elif name == "commercial_rev_share":
            normalized[name] = to_rev_share(value)
        elif name == "minting_fee":
            normalized[name] = to_decimal(value, name)
        elif name == "terms_uri":
            if not isinstance(value, str):
                raise ValidationError(f"terms_uri must be a string, got {value!r}")
            normalized[name] = value.strip()
    return normalized


# ── Free-text overrides ──────────────────────────────────────────────

_PERCENT_RE = re.compile(r"(?<![\d.])(\d+)\s*%")
_FEE_RE = re.compile(r"\$\s*(\d+(?:\.\d+)?)|(\d+(?:\.\d+)?)\s*(?:wip|dollars?|usd)\b")


def _keywords(*phrases: str, value: Any) -> Callable[[str], List[Any]]:
    def match(text: str) -> List[Any]:
        return [value] if any(p in text for p in phrases) else []
    return match


def _percentages(text: str) -> List[Any]:
    return [int(m.group(1)) for m in _PERCENT_RE.finditer(text)]


def _fee_amounts(text: str) -> List[Any]:
    return [Decimal(m.group(1) or m.group(2)) for m in _FEE_RE.finditer(text)]


@dataclass(frozen=True)
class OverrideRule:
    name: str
    field: str
    match: Callable[[str], List[Any]]


# Evaluated in this order against the lowercased description. The first rule
# that sets a field wins.
DESCRIPTION_RULES: Tuple[OverrideRule, ...] = (
    OverrideRule("no_commercial", "commercial_use",
                 _keywords("no commercial", "non-commercial", value=False)),
    OverrideRule("no_derivatives", "derivatives_allowed",
                 _keywords("no derivatives", "no remixes", value=False)),
    OverrideRule("free", "minting_fee",
                 _keywords("free", "no fee", value=Decimal(0))),
    OverrideRule("percentage", "commercial_rev_share", _percentages),
    OverrideRule("fee_amount", "minting_fee", _fee_amounts),
)


def _warn(message: str) -> None:
    logger.warning(message)
    warnings.warn(message, AmbiguousOverrideWarning, stacklevel=3)


def apply_description_overrides(
    params: Dict[str, Any], description: str
) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
    """
    Apply keyword rules from a natural-language description.

    Args:
        params: Already-defaulted parameters (not modified)
        description: Free text such as "no commercial, free minting, 20% revenue share"

    Returns:
        Tuple of (new parameters, list of {"rule", "field", "value"} applied)
    """
    text = description.lower()
    result = dict(params)
    applied: Dict[str, Dict[str, Any]] = {}

    for rule in DESCRIPTION_RULES:
        values = rule.match(text)
        if not values:
            continue
        value = values[0]
        if len(set(values)) > 1:
            _warn(
                f"Description matched several values for {rule.field} ({rule.name}): "
                f"{', '.join(str(v) for v in values)}; using {value}"
            )
        if rule.field in applied:
            previous = applied[rule.field]
            if previous["value"] != value:
                _warn(
                    f"Description rule {rule.name} ({rule.field}={value}) conflicts with "
                    f"{previous['rule']} ({rule.field}={previous['value']}); keeping {previous['value']}"
                )
            continue
        applied[rule.field] = {"rule": rule.name, "field": rule.field, "value": value}
        result[rule.field] = value

    if not applied:
        _warn(f"Description did not match any license rule: {description!r}")

    if "commercial_rev_share" in applied:
        result["commercial_rev_share"] = to_rev_share(result["commercial_rev_share"])

    return result, list(applied.values())


# ── Presets ──────────────────────────────────────────────────────────

def _assemble(params: Dict[str, Any], currency: Optional[str]) -> LicenseTerms:
    commercial = params["commercial_use"]
    derivatives = params["derivatives_allowed"]
    rev_share = params["commercial_rev_share"]

    return LicenseTerms(
        transferable=params["transferable"],
        royalty_policy=ROYALTY_POLICY_LAP if commercial and rev_share > 0 else None,
        default_minting_fee=parse_ether(params["minting_fee"], "minting_fee"),
        expiration=params["expiration"],
        commercial_use=commercial,
        commercial_attribution=commercial and params["commercial_attribution"],
        commercial_rev_share=rev_share,
        commercial_rev_ceiling=params["commercial_rev_ceiling"],
        derivatives_allowed=derivatives,
        derivatives_attribution=derivatives and params["derivatives_attribution"],
        derivatives_approval=derivatives and params["derivatives_approval"],
        derivatives_reciprocal=derivatives and params["derivatives_reciprocal"],
        derivative_rev_ceiling=params["derivative_rev_ceiling"] if derivatives else 0,
        currency=currency,
        uri=params["terms_uri"],
    )


def _non_commercial_params() -> Dict[str, Any]:
    return {
        **PARAM_DEFAULTS,
        "commercial_use": False,
        "commercial_attribution": False,
        "minting_fee": Decimal(0),
        "derivatives_allowed": True,
        "derivatives_attribution": True,
        "derivatives_approval": False,
        "derivatives_reciprocal": True,
        "terms_uri": NON_COMMERCIAL_URI,
    }


def build_license_terms(
    preset: str = CUSTOM,
    params: Optional[Dict[str, Any]] = None,
    description: Optional[str] = None,
) -> BuildResult:
    """
    Build PIL terms from a preset and caller parameters.

    Args:
        preset: custom, commercial_remix, non_commercial or commercial_use
        params: Caller parameters (see PARAM_DEFAULTS for names). None values
            fall back to the preset default.
        description: Natural-language overrides, honored for the custom preset only

    Returns:
        BuildResult with the terms, the effective parameters, and applied overrides

    Raises:
        ValidationError: unknown preset/parameter, negative amount, rev share
            outside 0-100, or a flag that is not a boolean
    """
    preset = (preset or CUSTOM).strip().lower()
    if preset not in PRESETS:
        raise ValidationError(f"Unknown license preset: {preset}. Must be one of: {', '.join(PRESETS)}")

    provided = normalize_params(params)
    overrides: List[Dict[str, Any]] = []

    if description and preset != CUSTOM:
        logger.info("Ignoring description for %s preset", preset)

    if preset == NON_COMMERCIAL:
        effective = _non_commercial_params()
        return BuildResult(preset, _assemble(effective, currency=None), effective)

    if preset == COMMERCIAL_REMIX:
        effective = {
            **PARAM_DEFAULTS,
            "minting_fee": Decimal(1),
            "commercial_rev_share": 5,
            "terms_uri": COMMERCIAL_REMIX_URI,
            **provided,
            "commercial_use": True,
            "derivatives_allowed": True,
            "derivatives_attribution": True,
            "derivatives_reciprocal": True,
            "derivatives_approval": False,
        }
    elif preset == COMMERCIAL_USE:
        effective = {
            **PARAM_DEFAULTS,
            **provided,
            "commercial_use": True,
            "derivatives_allowed": False,
        }
    else:
        effective = {**PARAM_DEFAULTS, **provided}
        if description:
            logger.info("Parsing license description: %r", description)
            effective, overrides = apply_description_overrides(effective, description)

    return BuildResult(preset, _assemble(effective, currency=WIP_TOKEN_ADDRESS), effective, overrides)
