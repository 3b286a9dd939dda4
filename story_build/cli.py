"""
CLI entry point for story-build.

Usage:
    story-build license preview [--preset custom] [--description "no derivatives, 10%"]
                                [--commercial-use true] [--minting-fee 2] [--rev-share 10]
    story-build fees quote --fee 1.5 --quantity 3 [--max-fee 5]
    story-build wallet generate
    story-build wallet check

All output is JSON. Exit codes: 0=success, 1=invalid input, 2=error.
"""
import argparse
import json
import logging
import sys
from typing import Any, Dict


def _output(data: Dict[str, Any], exit_code: int = 0):
    """Print JSON output and exit."""
    print(json.dumps(data, indent=2, default=str))
    sys.exit(exit_code)


def cmd_license(args):
    """Handle license subcommand."""
    from story_build.services import preview_license_terms

    params = {
        "commercial_use": args.commercial_use,
        "derivatives_allowed": args.derivatives_allowed,
        "minting_fee": args.minting_fee,
        "commercial_rev_share": args.rev_share,
        "expiration": args.expiration,
    }
    _output(preview_license_terms(license_type=args.preset, description=args.description, **params))


def cmd_fees(args):
    """Handle fees subcommand."""
    from story_build.fees import quote
    from story_build.units import format_ether, parse_ether

    max_fee = parse_ether(args.max_fee, "max_fee") if args.max_fee is not None else None
    fee_quote = quote(parse_ether(args.fee, "fee"), args.quantity, max_fee)
    _output({
        "status": "success",
        "quote": fee_quote.to_dict(),
        "total": f"{format_ether(fee_quote.total)} WIP",
        "max_minting_fee": f"{format_ether(fee_quote.ceiling)} WIP",
    })


def cmd_wallet(args):
    """Handle wallet subcommand."""
    if args.wallet_action == "generate":
        from eth_account import Account
        from eth_utils import to_hex

        account = Account.create()
        _output({
            "status": "success",
            "address": account.address,
            "private_key": to_hex(account.key),
            "warning": "Store this key yourself; story-build never writes it to disk. "
                       "Set WALLET_PRIVATE_KEY to use it.",
        })

    elif args.wallet_action == "check":
        from story_build.chain import StoryAgent
        from story_build.services import get_wallet_info

        _output(get_wallet_info(StoryAgent()))


def _bool_arg(value: str) -> bool:
    from story_build.license_terms import to_bool
    try:
        return to_bool(value, "flag")
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def main():
    """CLI entry point."""
    from story_build.errors import StoryBuildError, ValidationError

    parser = argparse.ArgumentParser(
        prog="story-build",
        description="Story Protocol license terms, fee quotes and wallet helpers",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log to stderr")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # ── license ──
    license_parser = subparsers.add_parser("license", help="License terms")
    license_subparsers = license_parser.add_subparsers(dest="license_action", help="License actions")

    preview = license_subparsers.add_parser("preview", help="Build license terms without a transaction")
    preview.add_argument("--preset", default="custom",
                         help="custom, commercial_remix, non_commercial or commercial_use")
    preview.add_argument("--description", help="Natural-language overrides (custom preset only)")
    preview.add_argument("--commercial-use", type=_bool_arg, help="true/false")
    preview.add_argument("--derivatives-allowed", type=_bool_arg, help="true/false")
    preview.add_argument("--minting-fee", help="Fee per token in WIP")
    preview.add_argument("--rev-share", help="Commercial revenue share percent (0-100)")
    preview.add_argument("--expiration", help="Unix timestamp, 0 for never")
    preview.set_defaults(func=cmd_license)

    # ── fees ──
    fees_parser = subparsers.add_parser("fees", help="Minting fee math")
    fees_subparsers = fees_parser.add_subparsers(dest="fees_action", help="Fee actions")

    fees_quote = fees_subparsers.add_parser("quote", help="Total and ceiling for a mint")
    fees_quote.add_argument("--fee", required=True, help="Per-token fee in WIP")
    fees_quote.add_argument("--quantity", type=int, default=1, help="Tokens to mint (default: 1)")
    fees_quote.add_argument("--max-fee", help="Explicit ceiling in WIP (default: total + 10%%)")
    fees_quote.set_defaults(func=cmd_fees)

    # ── wallet ──
    wallet_parser = subparsers.add_parser("wallet", help="Wallet helpers")
    wallet_subparsers = wallet_parser.add_subparsers(dest="wallet_action", help="Wallet actions")
    wallet_subparsers.add_parser("generate", help="Create a new private key (not saved)")
    wallet_subparsers.add_parser("check", help="Show the configured wallet and balance")
    wallet_parser.set_defaults(func=cmd_wallet)

    # Parse and dispatch
    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(2)

    sub_parsers = {"license": license_parser, "fees": fees_parser, "wallet": wallet_parser}
    action = getattr(args, f"{args.command}_action", None)
    if not hasattr(args, "func") or action is None:
        # Subcommand without an action (e.g. "fees" alone)
        sub_parsers[args.command].print_help()
        sys.exit(2)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.ERROR,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        args.func(args)
    except ValidationError as e:
        _output({"status": "error", "error": str(e)}, exit_code=1)
    except StoryBuildError as e:
        _output({"status": "error", "error": str(e)}, exit_code=2)


if __name__ == "__main__":
    main()
