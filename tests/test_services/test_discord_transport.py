import pytest
import discord
from unittest.mock import AsyncMock, MagicMock
from src.models.status_step import PresenceState
from src.services.discord_transport import DiscordPresenceTransport


@pytest.fixture
def client():
    client = MagicMock(spec=discord.Client)
    client.change_presence = AsyncMock()
    return client


class TestDiscordPresenceTransport:

    @pytest.mark.asyncio
    async def test_custom_status_with_custom_emoji(self, client):
        """Test custom status builds a CustomActivity with a partial emoji."""
        transport = DiscordPresenceTransport(client)

        result = await transport.set_custom_status("Hello", "wave", "112233445566778899", "1700000000000", "0",
                                                   animated=True)

        assert result is True
        kwargs = client.change_presence.call_args.kwargs
        activity = kwargs["activity"]
        assert isinstance(activity, discord.CustomActivity)
        assert activity.name == "Hello"
        assert activity.emoji.name == "wave"
        assert activity.emoji.id == 112233445566778899
        assert activity.emoji.animated is True
        assert kwargs["status"] == discord.Status.online

    @pytest.mark.asyncio
    async def test_zero_emoji_id_means_unicode(self, client):
        """Test the '0' id sentinel is decoded back to no id."""
        transport = DiscordPresenceTransport(client)

        await transport.set_custom_status("Coffee", "☕", "0", "1", "0")

        activity = client.change_presence.call_args.kwargs["activity"]
        assert activity.emoji.id is None
        assert activity.emoji.name == "☕"

    @pytest.mark.asyncio
    async def test_no_emoji(self, client):
        """Test an empty emoji name sends no emoji."""
        transport = DiscordPresenceTransport(client)

        await transport.set_custom_status("Just text", "", "0", "1", "0")

        assert client.change_presence.call_args.kwargs["activity"].emoji is None

    @pytest.mark.asyncio
    async def test_presence_state_keeps_activity(self, client):
        """Test changing the presence state re-sends the current activity."""
        transport = DiscordPresenceTransport(client)
        await transport.set_custom_status("Hello", "", "0", "1", "0")
        activity = transport.activity

        await transport.set_presence_state(PresenceState.DND)

        kwargs = client.change_presence.call_args.kwargs
        assert kwargs["status"] == discord.Status.dnd
        assert kwargs["activity"] is activity

    @pytest.mark.asyncio
    async def test_custom_status_keeps_presence_state(self, client):
        """Test a later custom status keeps the last presence state."""
        transport = DiscordPresenceTransport(client)
        await transport.set_presence_state(PresenceState.IDLE)

        await transport.set_custom_status("Later", "", "0", "1", "0")

        assert client.change_presence.call_args.kwargs["status"] == discord.Status.idle

    @pytest.mark.asyncio
    async def test_errors_propagate_to_applier(self, client):
        """Test Discord errors are left for the applier to handle."""
        client.change_presence.side_effect = ConnectionError("closed")
        transport = DiscordPresenceTransport(client)

        with pytest.raises(ConnectionError):
            await transport.set_custom_status("Hello", "", "0", "1", "0")

        assert transport.activity is None
