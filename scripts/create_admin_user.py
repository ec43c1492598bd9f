"""
Script to create an admin user for initial setup.

Run this after deploying to create the first admin account, or to promote
an existing account to admin.

Usage:
    python scripts/create_admin_user.py --email admin@example.com --name "Site Admin"
"""

import argparse
import asyncio
import getpass
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker

from weather_monitor.config import settings
from weather_monitor.core.exceptions import ConflictError
from weather_monitor.crud.user import user as user_crud
from weather_monitor.database import Base
from weather_monitor.models.user import Role
from weather_monitor.schemas.auth import UserCreate

import weather_monitor.models  # noqa: F401


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create or promote a Weather Monitor admin user")
    parser.add_argument("--email", required=True, help="Admin email address")
    parser.add_argument("--name", default="Administrator", help="Display name for a new account")
    parser.add_argument(
        "--password",
        help="Password for a new account (prompted for when omitted)",
    )
    return parser.parse_args(argv)


async def create_admin_user(email: str, name: str, password: str = None) -> None:
    """Create an admin user, or promote the existing account with that email."""
    print("=" * 80)
    print(f"{settings.PROJECT_NAME} - Admin User Setup")
    print("=" * 80)
    print(f"\nConnecting to database: {settings.DATABASE_URL.split('://')[0]}")

    # Create async engine
    engine = create_async_engine(settings.DATABASE_URL, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Create session
    async_session = sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    try:
        async with async_session() as db:
            existing = await user_crud.get_by_email(db, email=email.lower())

            if existing is not None:
                if existing.role == Role.ADMIN.value:
                    print(f"\n{email} is already an admin. Nothing to do.")
                    return
                await user_crud.update(db, db_obj=existing, obj_in={"role": Role.ADMIN.value})
                print(f"\nPromoted {email} to admin.")
                return

            if not password:
                password = getpass.getpass("Password for the new admin: ")

            try:
                admin = await user_crud.create(
                    db,
                    obj_in=UserCreate(name=name, email=email, password=password, role=Role.ADMIN),
                )
            except ConflictError:
                print(f"\n{email} was registered concurrently; run the script again to promote it.")
                return

            print("\n" + "=" * 80)
            print("ADMIN USER CREATED SUCCESSFULLY")
            print("=" * 80)
            print(f"\nUser ID: {admin.id}")
            print(f"Name: {admin.name}")
            print(f"Email: {admin.email}")
            print(f"Role: {admin.role}")
            print("=" * 80 + "\n")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    args = parse_args()
    asyncio.run(create_admin_user(args.email, args.name, args.password))
