#!/usr/bin/env python3
"""
Entrypoint script for development and management tasks.

    python manage.py seed-super-admin
    python manage.py ensure-indexes
"""
import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

# === Add 'src' directory to PYTHONPATH ===
PROJECT_ROOT = Path(__file__).resolve().parent
SRC_PATH = PROJECT_ROOT / "src"

if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

load_dotenv(dotenv_path=PROJECT_ROOT / ".env", override=True)

from common.logging.logger import log_info  # noqa: E402
from infrastructure.database.mongodb.connection import MongoDBConnection, ensure_indexes  # noqa: E402
from infrastructure.database.mongodb.repositories.admin_repository import AdminRepository  # noqa: E402
from infrastructure.setup.initial_setup import setup_super_admin  # noqa: E402


async def seed_super_admin() -> int:
    await MongoDBConnection.connect()
    try:
        db = MongoDBConnection.get_db()
        await ensure_indexes(db)
        admin_id = await setup_super_admin(AdminRepository(db))
    finally:
        await MongoDBConnection.disconnect()
    print(f"Super admin created: {admin_id}" if admin_id else "Super admin not created (exists or not configured).")
    return 0


async def create_indexes() -> int:
    await MongoDBConnection.connect()
    try:
        await ensure_indexes(MongoDBConnection.get_db())
    finally:
        await MongoDBConnection.disconnect()
    print("Indexes ensured.")
    return 0


COMMANDS = {
    "seed-super-admin": seed_super_admin,
    "ensure-indexes": create_indexes,
}


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="QV admin backend management tasks")
    parser.add_argument("command", choices=sorted(COMMANDS))
    args = parser.parse_args(argv)
    log_info("Manage script started.", extra={"command": args.command})
    return asyncio.run(COMMANDS[args.command]())


if __name__ == "__main__":
    sys.exit(main())
