#!/usr/bin/env python3
"""
Reset a user's password in the Carpost database.

The new password must satisfy the same rules as registration.

Usage:
    python reset_password.py --email user@example.com
    python reset_password.py --db ./carpost.db --email user@example.com --password "NewStrongPass!234"

Without --db the database from DATABASE_URL is used.  Without
--password the password is prompted for twice.  Exit codes: 1 for a
missing database or a rejected password, 2 for an unknown email.
"""

import argparse
import asyncio
import getpass
import os
import sys

from carpost_api.app.core.config import settings
from carpost_api.app.core.db import get_database_path
from carpost_api.app.core.logging_config import setup_logging
from carpost_api.app.core.validation import validate_profile_update
from carpost_api.app.services.user_service import UserService


def _prompt_password() -> tuple:
    password = getpass.getpass("New password: ")
    return password, getpass.getpass("Repeat new password: ")


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Reset a Carpost user password.")
    ap.add_argument("--db", help="SQLite DB path (overrides DATABASE_URL)")
    ap.add_argument("--email", required=True, help="Email of the account")
    ap.add_argument("--password", help="New password; prompted for if omitted")
    args = ap.parse_args(argv)

    setup_logging(settings.log_level)
    if args.db:
        settings.database_url = os.path.abspath(args.db)
    db_path = get_database_path()
    if not os.path.exists(db_path):
        print(f"[!] DB not found: {db_path}", file=sys.stderr)
        return 1

    if args.password is not None:
        password, confirmation = args.password, args.password
    else:
        password, confirmation = _prompt_password()
    errors = validate_profile_update({"password": password, "password_confirmation": confirmation})
    if errors:
        for message in errors:
            print(f"[!] {message}", file=sys.stderr)
        return 1

    email = args.email.strip().lower()
    if not asyncio.run(UserService().set_password(email, password)):
        print(f"[!] No user found with email: {email}", file=sys.stderr)
        return 2
    print(f"[+] Password updated for user: {email}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
