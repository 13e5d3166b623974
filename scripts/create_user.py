"""
Insert users for local testing.

Usage:
    python -m scripts.create_user USERNAME EMAIL
    python -m scripts.create_user --demo
"""

import argparse
import asyncio

from loggers import get_logger
from src.core.database.engine import engine
from src.core.database.session import async_session
from src.core.database.uow import get_uow
from src.user.models import User

logger = get_logger(__name__)

DEMO_USERS = [
    ("Ivan", "ivan@example.com"),
    ("Maria", "maria@example.com"),
]


async def create_users(users: list[tuple[str, str]]) -> list[User]:
    async with async_session() as session:
        async with get_uow(session) as uow:
            created = [
                await uow.users.create(
                    uow.session, {"username": username, "email": email}, flush=True
                )
                for username, email in users
            ]
            await uow.commit()

    for user in created:
        logger.info("Created user %s (%s)", user.username, user.id)
    await engine.dispose()
    return created


def main() -> None:
    parser = argparse.ArgumentParser(description="Create users for local testing.")
    parser.add_argument("username", nargs="?")
    parser.add_argument("email", nargs="?")
    parser.add_argument("--demo", action="store_true", help="create Ivan and Maria")
    args = parser.parse_args()

    if args.demo:
        users = DEMO_USERS
    elif args.username and args.email:
        users = [(args.username, args.email)]
    else:
        parser.error("pass USERNAME and EMAIL, or --demo")

    for user in asyncio.run(create_users(users)):
        print(f"{user.username}\t{user.email}\t{user.id}")


if __name__ == "__main__":
    main()
