#!/usr/bin/env python3
"""
Grant the admin role to an existing user.

Role changes are admin-only over the API, so the first administrator is
promoted from the server side.

Usage:
    python scripts/promote_admin.py someone@example.com
    python scripts/promote_admin.py someone@example.com --revoke
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.database import AsyncSessionLocal, engine  # noqa: E402
from app.schemas.users import UserRole  # noqa: E402
from app.services.user_service import UserService  # noqa: E402


async def promote(email: str, revoke: bool) -> int:
    """Set the role of the user with this email."""
    role = UserRole.USER if revoke else UserRole.ADMIN

    async with AsyncSessionLocal() as db:
        user = await UserService.get_user_by_email(db, email)
        if not user:
            print(f"✗ No user with email {email}", file=sys.stderr)
            return 1
        await UserService.set_role(db, user["id"], role)

    await engine.dispose()
    print(f"✓ {email} is now {role.value}")
    return 0


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Grant or revoke the admin role")
    parser.add_argument("email", help="Email of the user")
    parser.add_argument("--revoke", action="store_true", help="Set the role back to user")
    args = parser.parse_args()

    sys.exit(asyncio.run(promote(args.email, args.revoke)))


if __name__ == "__main__":
    main()
