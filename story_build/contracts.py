"""
Story Protocol contract addresses and the ABI fragments this package calls.

Protocol core contracts are deployed at the same addresses on Aeneid and
mainnet.
"""

from web3 import Web3


def _address(value: str) -> str:
    return Web3.to_checksum_address(value.lower())


ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Protocol tokens
WIP_TOKEN_ADDRESS = "0x1514000000000000000000000000000000000000"
IP_TOKEN_ADDRESS = "0x1516000000000000000000000000000000000000"

# Royalty policy
ROYALTY_POLICY_LAP = _address("0xBe54FB168b3c982b7AaE60dB6CF75Bd8447b390E")

# Core protocol
IP_ASSET_REGISTRY = _address("0x77319B4031e6eF1250907aa00018B8B1c67a244b")
LICENSE_REGISTRY = _address("0x529a750E02d8E2f15649c13D69a465286a780e24")
LICENSING_MODULE = _address("0x04fbd8a2e56dd85CFD5500A4A4DfA955B9f1dE6f")
PIL_LICENSE_TEMPLATE = _address("0x2E896b0b2Fdb7457499B56AAaA4AE55BCB4Cd316")
ROYALTY_MODULE = _address("0xD2f60c40fEbccf6311f8B47c4f2Ec6b040400086")

# Periphery: mints from an SPG NFT collection, registers the IP and attaches
# terms in one transaction
LICENSE_ATTACHMENT_WORKFLOWS = _address("0xcC2E862bCee5B6036Db0de6E06Ae87e524a79fd8")

# PIL documents used by the built-in flavors
COMMERCIAL_REMIX_URI = (
    "https://github.com/piplabs/pil-document/blob/"
    "ad67bb632a310d2557f8abcccd428e4c9c798db1/off-chain-terms/CommercialRemix.json"
)
NON_COMMERCIAL_URI = (
    "https://github.com/piplabs/pil-document/blob/"
    "998c13e6ee1d04eb817aefd1fe16dfe8be3cd7a2/off-chain-terms/NCSR.json"
)

# Built-in PIL flavor ids registered by the protocol
PIL_FLAVORS = {
    1: "Non-Commercial Social Remixing",
    2: "Commercial Use",
    3: "Commercial Remix",
}


def _fn(name, inputs, outputs=(), mutability="view"):
    return {
        "name": name,
        "type": "function",
        "stateMutability": mutability,
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "outputs": [{"name": n, "type": t} for n, t in outputs],
    }


# Field order of the PILTerms struct. LicenseTerms.to_contract_tuple() follows it.
PIL_TERMS_COMPONENTS = [
    ("transferable", "bool"),
    ("royaltyPolicy", "address"),
    ("defaultMintingFee", "uint256"),
    ("expiration", "uint256"),
    ("commercialUse", "bool"),
    ("commercialAttribution", "bool"),
    ("commercializerChecker", "address"),
    ("commercializerCheckerData", "bytes"),
    ("commercialRevShare", "uint32"),
    ("commercialRevCeiling", "uint256"),
    ("derivativesAllowed", "bool"),
    ("derivativesAttribution", "bool"),
    ("derivativesApproval", "bool"),
    ("derivativesReciprocal", "bool"),
    ("derivativeRevCeiling", "uint256"),
    ("currency", "address"),
    ("uri", "string"),
]

_PIL_TERMS_TUPLE = {
    "name": "terms",
    "type": "tuple",
    "components": [{"name": n, "type": t} for n, t in PIL_TERMS_COMPONENTS],
}

# Field order of Licensing.LicensingConfig
LICENSING_CONFIG_COMPONENTS = [
    ("isSet", "bool"),
    ("mintingFee", "uint256"),
    ("licensingHook", "address"),
    ("hookData", "bytes"),
    ("commercialRevShare", "uint32"),
    ("disabled", "bool"),
    ("expectMinimumGroupRewardShare", "uint32"),
    ("expectGroupRewardPool", "address"),
]

# An unset config leaves the terms' own values in force
EMPTY_LICENSING_CONFIG = (False, 0, ZERO_ADDRESS, b"", 0, False, 0, ZERO_ADDRESS)

ERC20_ABI = [
    _fn("name", [], [("", "string")]),
    _fn("symbol", [], [("", "string")]),
    _fn("decimals", [], [("", "uint8")]),
    _fn("totalSupply", [], [("", "uint256")]),
    _fn("balanceOf", [("account", "address")], [("", "uint256")]),
    _fn("allowance", [("owner", "address"), ("spender", "address")], [("", "uint256")]),
    _fn("approve", [("spender", "address"), ("amount", "uint256")], [("", "bool")], "nonpayable"),
    _fn("transfer", [("to", "address"), ("amount", "uint256")], [("", "bool")], "nonpayable"),
]

PIL_LICENSE_TEMPLATE_ABI = [
    {
        "name": "registerLicenseTerms",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [_PIL_TERMS_TUPLE],
        "outputs": [{"name": "id", "type": "uint256"}],
    },
    {
        "name": "getLicenseTermsId",
        "type": "function",
        "stateMutability": "view",
        "inputs": [_PIL_TERMS_TUPLE],
        "outputs": [{"name": "selectedLicenseTermsId", "type": "uint256"}],
    },
    {
        "name": "getLicenseTerms",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "selectedLicenseTermsId", "type": "uint256"}],
        "outputs": [_PIL_TERMS_TUPLE],
    },
    _fn("exists", [("licenseTermsId", "uint256")], [("", "bool")]),
]

LICENSING_MODULE_ABI = [
    _fn(
        "attachLicenseTerms",
        [("ipId", "address"), ("licenseTemplate", "address"), ("licenseTermsId", "uint256")],
        mutability="nonpayable",
    ),
    _fn(
        "mintLicenseTokens",
        [
            ("licensorIpId", "address"),
            ("licenseTemplate", "address"),
            ("licenseTermsId", "uint256"),
            ("amount", "uint256"),
            ("receiver", "address"),
            ("royaltyContext", "bytes"),
            ("maxMintingFee", "uint256"),
            ("maxRevenueShare", "uint32"),
        ],
        [("startLicenseTokenId", "uint256")],
        "nonpayable",
    ),
]

LICENSE_REGISTRY_ABI = [
    {
        "name": "getLicensingConfig",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "ipId", "type": "address"},
            {"name": "licenseTemplate", "type": "address"},
            {"name": "licenseTermsId", "type": "uint256"},
        ],
        "outputs": [
            {
                "name": "",
                "type": "tuple",
                "components": [{"name": n, "type": t} for n, t in LICENSING_CONFIG_COMPONENTS],
            }
        ],
    },
    _fn("getAttachedLicenseTermsCount", [("ipId", "address")], [("", "uint256")]),
    _fn(
        "getAttachedLicenseTerms",
        [("ipId", "address"), ("index", "uint256")],
        [("licenseTemplate", "address"), ("licenseTermsId", "uint256")],
    ),
]

IP_ASSET_REGISTRY_ABI = [
    _fn(
        "register",
        [("chainid", "uint256"), ("tokenContract", "address"), ("tokenId", "uint256")],
        [("id", "address")],
        "nonpayable",
    ),
    _fn(
        "ipId",
        [("chainId", "uint256"), ("tokenContract", "address"), ("tokenId", "uint256")],
        [("", "address")],
    ),
    _fn("isRegistered", [("id", "address")], [("", "bool")]),
]

# WIP wraps native IP 1:1
WIP_ABI = ERC20_ABI + [
    _fn("deposit", [], mutability="payable"),
    _fn("withdraw", [("value", "uint256")], mutability="nonpayable"),
]

LICENSE_ATTACHMENT_WORKFLOWS_ABI = [
    {
        "name": "mintAndRegisterIpAndAttachPILTerms",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "spgNftContract", "type": "address"},
            {"name": "recipient", "type": "address"},
            {
                "name": "ipMetadata",
                "type": "tuple",
                "components": [
                    {"name": "ipMetadataURI", "type": "string"},
                    {"name": "ipMetadataHash", "type": "bytes32"},
                    {"name": "nftMetadataURI", "type": "string"},
                    {"name": "nftMetadataHash", "type": "bytes32"},
                ],
            },
            {
                "name": "licenseTermsData",
                "type": "tuple[]",
                "components": [
                    _PIL_TERMS_TUPLE,
                    {
                        "name": "licensingConfig",
                        "type": "tuple",
                        "components": [{"name": n, "type": t} for n, t in LICENSING_CONFIG_COMPONENTS],
                    },
                ],
            },
            {"name": "allowDuplicates", "type": "bool"},
        ],
        "outputs": [
            {"name": "ipId", "type": "address"},
            {"name": "tokenId", "type": "uint256"},
            {"name": "licenseTermsIds", "type": "uint256[]"},
        ],
    },
]
