#!/usr/bin/env python3
"""
Generate a secure SECRET_KEY for the award pool application
"""

import secrets


def generate_secrets():
    """Print a random SECRET_KEY line for the .env file"""
    print("🔐 Generating secure secrets for Award Pool...")
    print("=" * 50)

    print(f"SECRET_KEY={secrets.token_urlsafe(32)}")

    print("=" * 50)
    print("📝 Copy this value to your .env file")
    print("⚠️  Keep it secret and never commit it to version control!")


if __name__ == "__main__":
    generate_secrets()
