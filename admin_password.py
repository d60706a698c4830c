#!/usr/bin/env python3
"""
Admin password utility.
Generates the ADMIN_PASSWORD_HASH for your .env file, or checks a password
against an existing hash.
"""
import argparse
import getpass
import sys

from app.utils.auth import hash_password, verify_password


def generate() -> int:
    print("=" * 60)
    print("CMS Admin Password Hash Generator")
    print("=" * 60)
    print()

    password = getpass.getpass("Enter admin password: ")
    if not password:
        print("\n❌ Error: Password cannot be empty")
        return 1

    if password != getpass.getpass("Confirm password: "):
        print("\n❌ Error: Passwords do not match")
        return 1

    print("\n⏳ Generating hash...")
    hashed = hash_password(password)
    print("\n✅ Success! Copy this line to your .env file:\n")
    print(f"ADMIN_PASSWORD_HASH={hashed}")
    print("\n⚠️  Keep this hash secret and never commit it to version control!")
    return 0


def verify(hash_value: str) -> int:
    print(f"Testing against hash: {hash_value[:30]}...")
    password = getpass.getpass("Enter password to test: ")

    if verify_password(password, hash_value):
        print("\n✅ Password matches!")
        return 0

    print("\n❌ Password does not match.")
    print("Generate a new hash with: python admin_password.py generate")
    return 1


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate or verify the admin password hash")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("generate", help="Generate a new bcrypt hash")
    verify_parser = subparsers.add_parser("verify", help="Check a password against a hash")
    verify_parser.add_argument("hash", help="bcrypt hash, e.g. '$2b$12$...'")

    args = parser.parse_args()
    if args.command == "generate":
        return generate()
    return verify(args.hash)


if __name__ == "__main__":
    sys.exit(main())
