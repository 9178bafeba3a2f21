"""
Bot class wiring the status rotation together.
"""

import discord
from discord.ext import commands
from typing import Iterable, List, Optional

from .storage import StorageManager
from ..services.discord_transport import DiscordPresenceTransport
from ..services.notifier import ChannelNotifier
from ..services.presence_applier import PresenceApplier
from ..services.rotation_scheduler import RotationScheduler
from ..services.step_store import StepStore
from ..utils.logger import get_logger
from ..utils.validators import Validators

log = get_logger("bot")


class MainBot(commands.Bot):
    """Main bot class with dependency injection."""

    def __init__(self, guild_ids: List[int], storage: StorageManager,
                 notify_channel_id: Optional[int] = None,
                 manager_roles: Iterable[str] = None):
        super().__init__(command_prefix="!", intents=discord.Intents.default())

        self.guild_ids = guild_ids
        self.storage = storage
        self.manager_roles = list(manager_roles) if manager_roles else None

        if notify_channel_id and not Validators.is_valid_discord_id(str(notify_channel_id)):
            log.warning(f"NOTIFY_CHANNEL_ID {notify_channel_id!r} does not look like a Discord ID, ignoring")
            notify_channel_id = None

        self.step_store = StepStore(storage)
        self.scheduler = RotationScheduler(
            self.step_store,
            PresenceApplier(DiscordPresenceTransport(self)),
            ChannelNotifier(self, notify_channel_id)
        )

    async def setup_hook(self):
        """Load cogs and sync commands."""
        await self.load_extension("src.cogs.status_rotation")

        for guild_id in self.guild_ids:
            guild_obj = discord.Object(id=guild_id)
            self.tree.copy_global_to(guild=guild_obj)
            await self.tree.sync(guild=guild_obj)

    async def on_ready(self):
        """Called when bot is ready."""
        log.info(f"Logged in as {self.user}, serving {len(self.guilds)} guilds")

    async def close(self):
        self.scheduler.stop()
        await super().close()
