import discord
from typing import Optional

from ..models.status_step import PresenceState
from ..utils.logger import get_logger

log = get_logger("transport")

STATUS_MAP = {
    PresenceState.ONLINE: discord.Status.online,
    PresenceState.IDLE: discord.Status.idle,
    PresenceState.DND: discord.Status.dnd,
    PresenceState.INVISIBLE: discord.Status.invisible,
}


class DiscordPresenceTransport:
    """Presence transport backed by ``Client.change_presence``.

    change_presence always sends activity and status together, so the last
    value of each is remembered and re-sent with every update.
    """

    def __init__(self, client: discord.Client, initial_status: discord.Status = discord.Status.online):
        self.client = client
        self.activity: Optional[discord.BaseActivity] = None
        self.status = initial_status

    async def set_custom_status(self, text: str, emoji_name: str, emoji_id: str,
                                created_at: str, expires_at: str, *,
                                animated: bool = False) -> bool:
        emoji = None
        if emoji_name:
            emoji = discord.PartialEmoji(
                name=emoji_name,
                id=None if emoji_id in ("", "0") else int(emoji_id),
                animated=animated
            )

        if expires_at not in ("", "0"):
            log.debug(f"Status expiry {expires_at} is not supported by bot presence, ignoring")

        activity = discord.CustomActivity(name=text, emoji=emoji)
        await self.client.change_presence(activity=activity, status=self.status)
        self.activity = activity
        log.debug(f"Custom status set to {text!r} (created {created_at})")
        return True

    async def set_presence_state(self, state: PresenceState) -> bool:
        status = STATUS_MAP[state]
        await self.client.change_presence(activity=self.activity, status=status)
        self.status = status
        return True
