#!/usr/bin/env python3
"""
Mint a development access token for a user id.

Production tokens come from the identity provider; this script signs
one with the local ``SECRET_KEY`` so the API can be exercised by hand.

Usage:
    SECRET_KEY=... python create_token.py --user-id 1 --days 30
"""

import argparse

from carpost_api.app.core.security import create_access_token


def main() -> None:
    ap = argparse.ArgumentParser(description="Create a Carpost API bearer token.")
    ap.add_argument("--user-id", type=int, required=True, help="Value of the token's sub claim")
    ap.add_argument("--days", type=int, default=1, help="Token lifetime in days (default: 1)")
    args = ap.parse_args()

    print(create_access_token(args.user_id, expires_delta=args.days * 24 * 60 * 60))


if __name__ == "__main__":
    main()
