"""
Licensing client: registers PIL terms, attaches them to IP assets and mints
license tokens through the Story Protocol contracts.
"""

import logging
from typing import Any, Dict, List, Optional

from story_build.contracts import (
    LICENSE_REGISTRY,
    LICENSE_REGISTRY_ABI,
    LICENSING_MODULE,
    LICENSING_MODULE_ABI,
    PIL_LICENSE_TEMPLATE,
    PIL_LICENSE_TEMPLATE_ABI,
)
from story_build.errors import ValidationError
from story_build.license_terms import REVENUE_SHARE_SCALE, LicenseTerms, to_rev_share

logger = logging.getLogger(__name__)


class LicensingClient:
    """Contract calls for the PIL license template and the licensing module."""

    def __init__(self, agent):
        self.agent = agent

    def get_license_terms_id(self, terms: LicenseTerms) -> int:
        """Id of identical terms already registered, or 0."""
        return self.agent.read(
            PIL_LICENSE_TEMPLATE, PIL_LICENSE_TEMPLATE_ABI, "getLicenseTermsId", terms.to_contract_tuple()
        )

    def register_license_terms(self, terms: LicenseTerms) -> Dict[str, Any]:
        """
        Register terms with the PIL template.

        The template deduplicates terms, so identical terms resolve to the
        existing id without sending a transaction.

        Returns:
            {"license_terms_id": int, "tx_hash": str or None, "already_registered": bool}
        """
        existing = self.get_license_terms_id(terms)
        if existing:
            logger.info("License terms already registered as %s", existing)
            return {"license_terms_id": existing, "tx_hash": None, "already_registered": True}

        encoded = terms.to_contract_tuple()
        terms_id = self.agent.simulate(
            PIL_LICENSE_TEMPLATE, PIL_LICENSE_TEMPLATE_ABI, "registerLicenseTerms", encoded
        )
        sent = self.agent.transact(
            PIL_LICENSE_TEMPLATE, PIL_LICENSE_TEMPLATE_ABI, "registerLicenseTerms", encoded
        )
        return {"license_terms_id": terms_id, "tx_hash": sent["tx_hash"], "already_registered": False}

    def license_terms_exist(self, license_terms_id: int) -> bool:
        return self.agent.read(PIL_LICENSE_TEMPLATE, PIL_LICENSE_TEMPLATE_ABI, "exists", license_terms_id)

    def get_license_terms(self, license_terms_id: int) -> LicenseTerms:
        """Fetch registered terms. Raises ValidationError if the id is unknown."""
        if not self.license_terms_exist(license_terms_id):
            raise ValidationError(f"Invalid license terms ID: {license_terms_id}. Make sure it exists.")
        raw = self.agent.read(
            PIL_LICENSE_TEMPLATE, PIL_LICENSE_TEMPLATE_ABI, "getLicenseTerms", license_terms_id
        )
        return LicenseTerms.from_contract_tuple(raw)

    def get_minting_fee(self, ip_id: str, license_terms_id: int, terms: Optional[LicenseTerms] = None) -> int:
        """
        Per-token minting fee for an IP/terms pair.

        The IP owner's licensing config wins when set; otherwise the terms'
        default fee applies.
        """
        config = self.agent.read(
            LICENSE_REGISTRY, LICENSE_REGISTRY_ABI, "getLicensingConfig",
            ip_id, PIL_LICENSE_TEMPLATE, license_terms_id,
        )
        is_set, minting_fee = config[0], config[1]
        if is_set:
            return minting_fee
        if terms is None:
            terms = self.get_license_terms(license_terms_id)
        return terms.default_minting_fee

    def get_attached_license_terms(self, ip_id: str) -> List[Dict[str, Any]]:
        count = self.agent.read(LICENSE_REGISTRY, LICENSE_REGISTRY_ABI, "getAttachedLicenseTermsCount", ip_id)
        attached = []
        for index in range(count):
            template, terms_id = self.agent.read(
                LICENSE_REGISTRY, LICENSE_REGISTRY_ABI, "getAttachedLicenseTerms", ip_id, index
            )
            attached.append({"license_template": template, "license_terms_id": terms_id})
        return attached

    def attach_license_terms(self, ip_id: str, license_terms_id: int) -> Dict[str, Any]:
        """Returns {"tx_hash": str}."""
        args = (ip_id, PIL_LICENSE_TEMPLATE, license_terms_id)
        self.agent.simulate(LICENSING_MODULE, LICENSING_MODULE_ABI, "attachLicenseTerms", *args)
        sent = self.agent.transact(LICENSING_MODULE, LICENSING_MODULE_ABI, "attachLicenseTerms", *args)
        return {"tx_hash": sent["tx_hash"]}

    def mint_license_tokens(
        self,
        licensor_ip_id: str,
        license_terms_id: int,
        amount: int,
        receiver: str,
        max_minting_fee: int,
        max_revenue_share: int = 100,
    ) -> Dict[str, Any]:
        """
        Mint license tokens. Token ids are consecutive from the returned start id.

        Returns:
            {"license_token_ids": [int, ...], "tx_hash": str}
        """
        args = (
            licensor_ip_id,
            PIL_LICENSE_TEMPLATE,
            license_terms_id,
            amount,
            receiver,
            b"",
            max_minting_fee,
            to_rev_share(max_revenue_share, "max_revenue_share") * REVENUE_SHARE_SCALE,
        )
        start_id = self.agent.simulate(LICENSING_MODULE, LICENSING_MODULE_ABI, "mintLicenseTokens", *args)
        sent = self.agent.transact(LICENSING_MODULE, LICENSING_MODULE_ABI, "mintLicenseTokens", *args)
        return {
            "license_token_ids": list(range(start_id, start_id + amount)),
            "tx_hash": sent["tx_hash"],
        }
