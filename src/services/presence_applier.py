import asyncio
import time
from typing import Optional, Protocol

from ..models.status_step import PresenceState, StatusStep
from ..utils.logger import get_logger

log = get_logger("presence")

DEFAULT_TIMEOUT = 10.0
NO_EMOJI_ID = "0"
NEVER_EXPIRES = "0"


class PresenceTransport(Protocol):
    """The calls the applier needs from whatever owns the presence."""

    async def set_custom_status(self, text: str, emoji_name: str, emoji_id: str,
                                created_at: str, expires_at: str, *,
                                animated: bool = False) -> bool:
        ...

    async def set_presence_state(self, state: PresenceState) -> bool:
        ...


class PresenceApplier:
    """Pushes a StatusStep to the presence transport."""

    def __init__(self, transport: PresenceTransport, timeout: float = DEFAULT_TIMEOUT):
        self.transport = transport
        self.timeout = timeout

    async def apply(self, step: StatusStep) -> bool:
        """Apply ``step``. Success depends only on the custom status update."""
        emoji = step.emoji
        emoji_id: Optional[int] = emoji.id if emoji else None

        try:
            result = await asyncio.wait_for(
                self.transport.set_custom_status(
                    step.text or "",
                    emoji.name if emoji else "",
                    str(emoji_id) if emoji_id is not None else NO_EMOJI_ID,
                    str(int(time.time() * 1000)),
                    NEVER_EXPIRES,
                    animated=bool(emoji and emoji.animated)
                ),
                timeout=self.timeout
            )
        except asyncio.TimeoutError:
            log.warning(f"Custom status update timed out after {self.timeout}s")
            return False
        except Exception as e:
            log.warning(f"Custom status update failed: {e}")
            return False

        if not result:
            log.warning("Custom status update was rejected")
            return False

        if step.presence_state is not None:
            await self._apply_presence_state(step.presence_state)

        return True

    async def _apply_presence_state(self, state: PresenceState) -> None:
        # Best effort: the custom status is already set at this point
        try:
            result = await asyncio.wait_for(
                self.transport.set_presence_state(state), timeout=self.timeout
            )
            if not result:
                log.info(f"Presence state '{state.value}' was rejected")
        except Exception as e:
            log.info(f"Could not set presence state '{state.value}': {e}")
