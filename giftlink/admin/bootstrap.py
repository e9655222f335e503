from __future__ import annotations

import argparse
import asyncio
import getpass

from sqlalchemy import select

from giftlink.core.database import AsyncSessionLocal, init_db
from giftlink.models.admin_user import ADMIN_ROLES, AdminUser
from giftlink.services.auth import hash_password


async def _create_admin(username: str, password: str, role: str, display_name: str | None) -> None:
    await init_db()
    async with AsyncSessionLocal() as session:
        existing = await session.scalar(select(AdminUser).where(AdminUser.username == username))
        if existing:
            raise ValueError(f"Admin user already exists: {username}")

        admin = AdminUser(
            username=username,
            display_name=display_name,
            hashed_password=hash_password(password),
            role=role,
            is_active=True,
        )
        session.add(admin)
        await session.commit()
        await session.refresh(admin)

    print(f"Created admin user: {admin.username} (id={admin.id}, role={admin.role})")


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a dashboard user.")
    parser.add_argument("--email", required=True, help="Login email (used as username).")
    parser.add_argument("--password", help="Password (prompted if omitted).")
    parser.add_argument("--name", help="Display name shown in the dashboard.")
    parser.add_argument("--role", default="admin", choices=list(ADMIN_ROLES))
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    username = args.email.strip().lower()
    password = args.password or getpass.getpass("Password: ")
    if not password.strip():
        raise SystemExit("Password is required")

    try:
        asyncio.run(_create_admin(username, password, args.role, args.name))
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc


if __name__ == "__main__":
    main()
