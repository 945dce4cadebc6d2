import argparse
import asyncio
import os
import sys
from pathlib import Path

# Add project root to path to import libs
sys.path.append(str(Path(__file__).resolve().parents[2]))

from dotenv import load_dotenv

# Load env file selected for the run (defaults to .env when ENV_FILE not set)
# MUST be done before importing libs that use get_settings()
project_root = Path(__file__).resolve().parents[2]
env_file = os.environ.get("ENV_FILE", ".env")
load_dotenv(project_root / env_file, override=True)

from libs.auth.security import hash_password
from libs.db.config import AsyncSessionLocal
from services.identity_service.models import User
from services.identity_service.services.accounts import (
    get_user_by_email,
    normalize_email,
)


async def create_admin_user(email: str, password: str, name: str) -> None:
    """Promote an existing account to admin, or create a verified admin account."""
    print("🚀 Starting Admin User Creation Script")
    email = normalize_email(email)

    async with AsyncSessionLocal() as db:
        user = await get_user_by_email(db, email)
        if user is not None:
            user.is_admin = True
            user.is_verified = True
            await db.commit()
            print(f"✅ Promoted existing user {email} to admin")
            return

        db.add(
            User(
                name=name,
                email=email,
                password_hash=hash_password(password),
                is_admin=True,
                is_verified=True,
                addresses=[],
            )
        )
        await db.commit()
        print(f"✅ Created admin user {email}")
        print("⚠️  Change the password after first login")


def main() -> None:
    parser = argparse.ArgumentParser(description="Create or promote a store admin")
    parser.add_argument("--email", default="admin@example.com")
    parser.add_argument("--password", default="admin123")
    parser.add_argument("--name", default="Admin User")
    args = parser.parse_args()
    asyncio.run(create_admin_user(args.email, args.password, args.name))


if __name__ == "__main__":
    main()
