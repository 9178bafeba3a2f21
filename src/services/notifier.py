import discord
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from ..utils.discord_helpers import DiscordHelpers
from ..utils.logger import get_logger

log = get_logger("notifier")


class NoticeKind(Enum):
    STARTED = "started"
    EMPTY = "empty"
    CATEGORY_EMPTY = "category_empty"
    START_FAILED = "start_failed"
    ABORTED = "aborted"

    @property
    def is_failure(self) -> bool:
        return self not in (NoticeKind.STARTED, NoticeKind.EMPTY)


@dataclass
class Notice:
    """A human-readable message about the rotation lifecycle."""
    kind: NoticeKind
    message: str


class Notifier(Protocol):
    async def notify(self, notice: Notice) -> None:
        ...


class LoggingNotifier:
    """Writes notices to the log only."""

    async def notify(self, notice: Notice) -> None:
        if notice.kind is NoticeKind.STARTED:
            log.info(notice.message)
        else:
            log.warning(f"[{notice.kind.value}] {notice.message}")


class ChannelNotifier(LoggingNotifier):
    """Logs notices and posts them as embeds to a channel, if one is configured."""

    def __init__(self, bot: discord.Client, channel_id: Optional[int] = None):
        self.bot = bot
        self.channel_id = channel_id

    async def notify(self, notice: Notice) -> None:
        await super().notify(notice)

        if not self.channel_id:
            return

        channel = self.bot.get_channel(self.channel_id)
        if channel is None:
            log.debug(f"Notification channel {self.channel_id} not found")
            return

        try:
            await channel.send(embed=self.build_embed(notice))
        except discord.HTTPException as e:
            log.error(f"Failed to post notice to channel {self.channel_id}: {e}")

    @staticmethod
    def build_embed(notice: Notice) -> discord.Embed:
        if notice.kind.is_failure:
            return DiscordHelpers.error_embed("Status Rotation", notice.message, timestamp=True)
        if notice.kind is NoticeKind.STARTED:
            return DiscordHelpers.success_embed("Status Rotation", notice.message, timestamp=True)
        return DiscordHelpers.info_embed("Status Rotation", notice.message, timestamp=True)
