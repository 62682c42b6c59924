# scripts/manage_users.py

import argparse
import asyncio
import sys

from qrmenu.core.config import get_settings
from qrmenu.crud import user as user_crud
from qrmenu.db import create_database

if sys.platform.startswith('win') and sys.version_info < (3, 10):
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())


async def create_user(email, password, name, role, cafe_id=None):
    db = create_database(get_settings())
    try:
        if await user_crud.email_exists(db, email):
            print(f"⚠️  User '{email}' already exists. Skipping.")
            return
        user_id = await user_crud.create_user(
            db, email=email, password=password, name=name, role=role, cafe_id=cafe_id,
        )
        print(f"✅ Created: {name} <{email}> ({role}) id={user_id}")
    finally:
        await db.close()


async def list_owners():
    db = create_database(get_settings())
    try:
        owners = await user_crud.list_owners(db)
        if not owners:
            print("⚠️  No owners found.")
        for owner in owners:
            status = "active" if owner["is_active"] else "inactive"
            print(f"  {owner['id']:>4}  {owner['email']:<32} {status:<8} {owner['cafe_name'] or '-'}")
    finally:
        await db.close()


async def reset_password(email, password):
    db = create_database(get_settings())
    try:
        user = await user_crud.get_active_user_by_email(db, email)
        if not user:
            print(f"⚠️  No active user found with email: {email}")
            return
        await user_crud.set_password(db, user["id"], password)
        print(f"🔐 Password reset for {email}")
    finally:
        await db.close()


async def delete_owner(email):
    db = create_database(get_settings())
    try:
        user = await db.get("SELECT id FROM users WHERE email = ? AND role = 'owner'", email)
        if user and await user_crud.delete_owner(db, user["id"]):
            print(f"🗑️  Deleted owner: {email}")
        else:
            print(f"⚠️  No owner found with email: {email}")
    finally:
        await db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Manage QR Menu users")
    parser.add_argument("--create", action="store_true", help="Create a user")
    parser.add_argument("--list", action="store_true", help="List café owners")
    parser.add_argument("--reset-password", action="store_true", help="Reset a user's password")
    parser.add_argument("--delete", action="store_true", help="Delete an owner")
    parser.add_argument("--email", type=str, help="User email")
    parser.add_argument("--password", type=str, help="User password")
    parser.add_argument("--name", type=str, default="Cafe Owner", help="Display name")
    parser.add_argument("--role", type=str, default="owner", choices=["admin", "owner"])
    parser.add_argument("--cafe-id", type=int, help="Café to link an owner to")

    args = parser.parse_args()

    if args.create and args.email and args.password:
        asyncio.run(create_user(args.email, args.password, args.name, args.role, args.cafe_id))
    elif args.list:
        asyncio.run(list_owners())
    elif args.reset_password and args.email and args.password:
        asyncio.run(reset_password(args.email, args.password))
    elif args.delete and args.email:
        asyncio.run(delete_owner(args.email))
    else:
        print("❗ Usage:")
        print("  python -m scripts.manage_users --create --email owner@cafe.com --password secret --cafe-id 1")
        print("  python -m scripts.manage_users --list")
        print("  python -m scripts.manage_users --reset-password --email owner@cafe.com --password newsecret")
        print("  python -m scripts.manage_users --delete --email owner@cafe.com")
