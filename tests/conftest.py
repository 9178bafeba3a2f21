import pytest
import pytest_asyncio
import random
import discord
from unittest.mock import AsyncMock, MagicMock
from src.core.storage import StorageManager
from src.services.presence_applier import PresenceApplier
from src.services.rotation_scheduler import RotationScheduler
from src.services.step_store import StepStore


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float = 5.0):
        self.now += seconds


@pytest.fixture
def mock_user():
    """Create a mock Discord member with admin permissions."""
    user = MagicMock(spec=discord.Member)
    user.id = 987654321
    user.name = "TestUser"
    user.guild_permissions.administrator = True
    user.roles = []
    return user


@pytest.fixture
def mock_interaction(mock_user):
    """Create a mock Discord interaction."""
    interaction = MagicMock()
    interaction.user = mock_user
    interaction.response.send_message = AsyncMock()
    interaction.response.defer = AsyncMock()
    interaction.response.is_done = MagicMock(return_value=False)
    interaction.followup.send = AsyncMock()
    return interaction


@pytest.fixture
def storage_manager(tmp_path):
    """Create a StorageManager with temporary directory."""
    return StorageManager(str(tmp_path))


@pytest.fixture
def step_store(storage_manager):
    return StepStore(storage_manager)


@pytest.fixture
def write_steps(storage_manager):
    """Write a rotation.json with the given steps and settings."""
    def _write(steps, interval=5, randomize=False, **extra):
        data = {"steps": steps, "interval": interval, "randomize": randomize}
        data.update(extra)
        storage_manager.save("rotation.json", data)
    return _write


@pytest.fixture
def transport():
    """Presence transport that accepts every update."""
    transport = MagicMock()
    transport.set_custom_status = AsyncMock(return_value=True)
    transport.set_presence_state = AsyncMock(return_value=True)
    return transport


@pytest.fixture
def applier(transport):
    return PresenceApplier(transport, timeout=1.0)


@pytest.fixture
def notifier():
    notifier = MagicMock()
    notifier.notify = AsyncMock()
    return notifier


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backoff_sleep():
    return AsyncMock()


@pytest_asyncio.fixture
async def scheduler(step_store, applier, notifier, clock, backoff_sleep):
    """Scheduler with a fake clock and instant backoff; stopped after each test."""
    scheduler = RotationScheduler(
        step_store, applier, notifier,
        clock=clock, sleep=backoff_sleep, rng=random.Random(1234)
    )
    yield scheduler
    scheduler.stop()
