"""Initialize the SQLite conversation database and schema."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# Add project root so agent_chat_sdk is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from agent_chat_sdk.memory.sqlite_storage import SQLiteStorage
from agent_chat_sdk.utils.config import load_config


async def main() -> None:
    config = load_config()
    path = Path(config.get("storage", {}).get("database_path", "data/agent_chat.db"))
    async with SQLiteStorage(db_path=path):
        print("Database initialized at", path.absolute())


if __name__ == "__main__":
    asyncio.run(main())
