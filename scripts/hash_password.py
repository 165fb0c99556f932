#!/usr/bin/env python
"""Generate the bcrypt hash for ADMIN_PASSWORD_HASH.

Usage:
    # Prompt for the password
    python scripts/hash_password.py

    # Pass it on the command line (ends up in shell history)
    python scripts/hash_password.py --password 's3cret'
"""

import argparse
import getpass
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from storefront.services.auth import hash_password, verify_password

MIN_LENGTH = 8


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Generate a bcrypt hash for the admin password",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--password",
        type=str,
        help="Password to hash (prompted when omitted)",
    )
    return parser.parse_args()


def main() -> int:
    """Main entry point."""
    args = parse_args()

    password = args.password
    if password is None:
        password = getpass.getpass("Admin password: ")
        if password != getpass.getpass("Repeat password: "):
            print("Error: passwords do not match")
            return 1

    if len(password) < MIN_LENGTH:
        print(f"Error: password must have at least {MIN_LENGTH} characters")
        return 1

    password_hash = hash_password(password)
    if not verify_password(password, password_hash):
        print("Error: generated hash does not verify")
        return 1

    print("\nAdd this line to your .env:")
    print(f"ADMIN_PASSWORD_HASH={password_hash}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
