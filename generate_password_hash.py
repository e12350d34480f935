#!/usr/bin/env python3
"""
Admin Credential Generator
Generates the bcrypt ADMIN_PASSWORD_HASH and a random JWT_SECRET_KEY for the
transfer site admin panel. Paste the printed lines into your .env file.
"""
import getpass
import secrets

from transfer_site.utils.auth import hash_password, verify_password


def main():
    """Prompt for the admin password and print the .env lines."""
    print("=" * 60)
    print("Transfer Site Admin Credential Generator")
    print("=" * 60)
    print()

    username = input("Admin username [admin]: ").strip() or "admin"

    # Get password securely (won't echo to screen)
    password = getpass.getpass("Enter admin password: ")

    if not password:
        print("\n❌ Error: Password cannot be empty")
        return

    password_confirm = getpass.getpass("Confirm password: ")

    if password != password_confirm:
        print("\n❌ Error: Passwords do not match")
        return

    print("\n⏳ Generating hash (this may take a moment)...")

    hashed = hash_password(password)
    if not verify_password(password, hashed):
        print("\n❌ Error: Generated hash failed verification")
        return

    print("\n✅ Success! Copy these lines to your .env file:\n")
    print(f"ADMIN_USERNAME={username}")
    print(f"ADMIN_PASSWORD_HASH={hashed}")
    print(f"JWT_SECRET_KEY={secrets.token_urlsafe(48)}")
    print()
    print("⚠️  Keep these values secret and never commit them to version control!")
    print()


if __name__ == "__main__":
    main()
