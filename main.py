#!/usr/bin/env python3
"""
Main entry point for the status rotation bot.
"""

import asyncio
import sys

from src.core.bot import MainBot
from src.core.storage import StorageManager
from src.utils.logger import get_logger, setup_logging

# Import config - you'll need to create this file
try:
    import config
    GUILD_IDS = config.GUILD_IDS
    BOT_TOKEN = config.BOT_TOKEN
except (ImportError, AttributeError):
    print("Please create config.py with your bot settings!")
    print("Required variables: GUILD_IDS, BOT_TOKEN")
    sys.exit(1)

DATA_DIR = getattr(config, "DATA_DIR", "data")
LOG_LEVEL = getattr(config, "LOG_LEVEL", "INFO")
NOTIFY_CHANNEL_ID = getattr(config, "NOTIFY_CHANNEL_ID", None)
MANAGER_ROLE_NAMES = getattr(config, "MANAGER_ROLE_NAMES", None)

log = get_logger("main")


async def main():
    """Main function to run the bot."""
    setup_logging(LOG_LEVEL)

    storage = StorageManager(DATA_DIR)
    bot = MainBot(
        guild_ids=GUILD_IDS,
        storage=storage,
        notify_channel_id=NOTIFY_CHANNEL_ID,
        manager_roles=MANAGER_ROLE_NAMES
    )

    async with bot:
        await bot.start(BOT_TOKEN)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        log.info("Bot stopped.")
