"""Helper script to run the Bynder OAuth2 authorization-code flow by hand.

Usage:
    python scripts/obtain_token.py login-url --scope "offline asset:read" --state abc123
    python scripts/obtain_token.py redeem --code CODE > conf/token.json

The script reads client settings from conf/bynder.yml using ClientConfig.from_file().
Point BYNDER_TOKEN_PATH at the redeemed file so later clients start with that token.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import secrets
import sys
from pathlib import Path

from loguru import logger

# Import after sys.path adjustment to allow running as script
SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from bynder_sdk import BynderClient, ClientConfig  # noqa: E402
from bynder_sdk.logging_setup import enable_logging  # noqa: E402

DEFAULT_SCOPE = "offline asset:read meta.assetbank:read"


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--config", type=Path, default=None, help="Path to bynder.yml")
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")
    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login-url", help="Print the consent URL to open in a browser")
    login.add_argument("--scope", default=DEFAULT_SCOPE)
    login.add_argument("--state", default=None, help="Anti-CSRF state (random when omitted)")

    redeem = sub.add_parser("redeem", help="Exchange an authorization code for a token")
    redeem.add_argument("--code", required=True)

    return parser.parse_args(argv)


async def _redeem(client: BynderClient, code: str) -> dict[str, object]:
    async with client:
        token = await client.get_token(code)
    return token.to_dict()


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    enable_logging("DEBUG" if args.verbose else "INFO")

    config = ClientConfig.from_file(args.config)
    if not config.redirect_uri:
        logger.error("BYNDER_REDIRECT_URI must be set for the authorization-code flow")
        return 1

    client = BynderClient(config)
    if args.command == "login-url":
        state = args.state or secrets.token_urlsafe(16)
        print(client.make_authorization_url(state=state, scope=args.scope))
        asyncio.run(client.aclose())
        return 0

    token = asyncio.run(_redeem(client, args.code))
    print(json.dumps(token, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
