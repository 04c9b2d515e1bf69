#!/usr/bin/env python3
"""Manage user API keys for the Participa API."""

import sys
import argparse
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from participa.db import get_session, init_db, APIKey, User
from participa.config import get
from participa.api.auth import generate_api_key, hash_api_key


def create_key(email: str, description: str = None):
    """Create a new API key for a user."""
    init_db(get("database.path"))

    api_key = generate_api_key()

    with get_session() as session:
        user = session.query(User).filter_by(email=email).first()
        if not user:
            print(f"❌ No user with email {email}")
            return

        key_obj = APIKey(
            key=hash_api_key(api_key),
            user=user,
            description=description,
            is_active=True
        )
        session.add(key_obj)
        session.flush()

        print("\n✅ API Key Created Successfully!")
        print("\n" + "="*60)
        print(f"User: {user.name} <{user.email}>{' [ADMIN]' if user.admin else ''}")
        print(f"Description: {description or 'N/A'}")
        print(f"Created: {key_obj.created_at}")
        print("\n" + "="*60)
        print(f"API Key: {api_key}")
        print("="*60)
        print("\n⚠️  IMPORTANT: Save this key now - it won't be shown again!")
        print()


def list_keys():
    """List all API keys."""
    init_db(get("database.path"))

    with get_session() as session:
        keys = session.query(APIKey).order_by(APIKey.created_at.desc()).all()

        if not keys:
            print("No API keys found.")
            return

        print("\nAPI Keys:")
        print("="*80)
        for key in keys:
            status = "✓ Active" if key.is_active else "✗ Inactive"
            last_used = key.last_used.strftime("%Y-%m-%d %H:%M") if key.last_used else "Never"

            print(f"\n ID: {key.id}")
            print(f" User: {key.user.email}")
            print(f" Description: {key.description or 'N/A'}")
            print(f" Status: {status}")
            print(f" Last Used: {last_used}")
            print(f" Usage Count: {key.usage_count}")

        print("="*80)
        print()


def set_active(key_id: int, active: bool):
    """Activate or deactivate an API key."""
    init_db(get("database.path"))

    with get_session() as session:
        key = session.query(APIKey).filter_by(id=key_id).first()

        if not key:
            print(f"❌ API key #{key_id} not found.")
            return

        key.is_active = active
        print(f"\n✅ API key #{key_id} has been {'activated' if active else 'deactivated'}.")
        print()


def delete_key(key_id: int):
    """Delete an API key."""
    init_db(get("database.path"))

    with get_session() as session:
        key = session.query(APIKey).filter_by(id=key_id).first()

        if not key:
            print(f"❌ API key #{key_id} not found.")
            return

        session.delete(key)
        print(f"\n✅ API key #{key_id} has been deleted.")
        print()


def main():
    parser = argparse.ArgumentParser(description="Manage API keys for the Participa API")
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    create_parser = subparsers.add_parser("create", help="Create a new API key")
    create_parser.add_argument("email", help="Email of the user the key belongs to")
    create_parser.add_argument("--description", "-d", help="What the key is used for")

    subparsers.add_parser("list", help="List all API keys")

    deactivate_parser = subparsers.add_parser("deactivate", help="Deactivate an API key")
    deactivate_parser.add_argument("id", type=int, help="API key ID")

    activate_parser = subparsers.add_parser("activate", help="Activate an API key")
    activate_parser.add_argument("id", type=int, help="API key ID")

    delete_parser = subparsers.add_parser("delete", help="Delete an API key")
    delete_parser.add_argument("id", type=int, help="API key ID")

    args = parser.parse_args()

    if args.command == "create":
        create_key(args.email, args.description)
    elif args.command == "list":
        list_keys()
    elif args.command == "deactivate":
        set_active(args.id, False)
    elif args.command == "activate":
        set_active(args.id, True)
    elif args.command == "delete":
        delete_key(args.id)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
