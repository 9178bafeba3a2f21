"""
Slash commands for the status rotation.
Lets managers edit the status list and start/stop the rotation.
"""

import asyncio
from typing import Optional

import discord
from discord import app_commands
from discord.ext import commands

from ..core.errors import EmptyStepSet, InitialApplyFailed, RotationError
from ..core.permissions import PermissionChecker
from ..models.status_step import PresenceState, normalize_category, parse_status_input
from ..services.rotation_scheduler import MIN_INTERVAL_SECONDS, RotationScheduler
from ..services.step_store import StepStore
from ..utils.discord_helpers import DiscordHelpers
from ..utils.logger import get_logger
from ..utils.validators import Validators

log = get_logger("status_cog")

AUTO_START_DELAY = 3
MAX_INTERVAL_SECONDS = 3600

PRESENCE_CHOICES = [
    app_commands.Choice(name="Online", value=PresenceState.ONLINE.value),
    app_commands.Choice(name="Idle", value=PresenceState.IDLE.value),
    app_commands.Choice(name="Do Not Disturb", value=PresenceState.DND.value),
    app_commands.Choice(name="Invisible", value=PresenceState.INVISIBLE.value),
]


class StatusRotationCog(commands.GroupCog, group_name="status",
                        group_description="Rotate the bot's custom status"):
    """Manage and run the custom status rotation."""

    def __init__(self, bot: commands.Bot, scheduler: RotationScheduler,
                 store: StepStore, permissions: PermissionChecker):
        self.bot = bot
        self.scheduler = scheduler
        self.store = store
        self.permissions = permissions
        self._auto_start_done = False
        self.store.subscribe(self._on_setting_changed)

    async def cog_unload(self):
        """Stop rotating when the cog goes away."""
        self.store.unsubscribe(self._on_setting_changed)
        self.scheduler.stop()

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        return await self.permissions.check_interaction(interaction)

    def _on_setting_changed(self, key: str):
        if key == "interval":
            self.scheduler.reconfigure_interval(self.store.read_interval())

    @commands.Cog.listener()
    async def on_ready(self):
        """Auto-start once per process, shortly after connecting."""
        if self._auto_start_done or not self.store.read_auto_start():
            return
        self._auto_start_done = True

        await asyncio.sleep(AUTO_START_DELAY)
        if self.scheduler.is_running():
            return

        try:
            await self.scheduler.start(self.store.read_active_category())
        except RotationError as e:
            log.warning(f"Auto-start skipped: {e}")

    # ------------------------------------------------------------------
    # Running
    # ------------------------------------------------------------------

    @app_commands.command(name="start", description="Start rotating statuses")
    @app_commands.describe(category="Only rotate statuses in this category")
    async def start_rotation(self, interaction: discord.Interaction, category: Optional[str] = None):
        await interaction.response.defer(ephemeral=True)

        category = normalize_category(category)
        try:
            await self.scheduler.start(category)
        except EmptyStepSet as e:
            await interaction.followup.send(
                embed=DiscordHelpers.error_embed("Nothing to Rotate", f"{e}. Add some with `/status add`."),
                ephemeral=True
            )
            return
        except InitialApplyFailed:
            await interaction.followup.send(
                embed=DiscordHelpers.error_embed(
                    "Failed to Start",
                    "Discord kept rejecting the first status. Try again in a moment."
                ),
                ephemeral=True
            )
            return

        self.store.set_active_category(category)
        step = self.scheduler.current_step
        description = f"Now showing: {step.display()}" if step else None
        await interaction.followup.send(
            embed=DiscordHelpers.success_embed(
                "Status Rotation Started", description,
                footer=f"Every {self.scheduler.interval_seconds:g}s"
                       f"{f' · category {category}' if category else ''}"
            ),
            ephemeral=True
        )

    @app_commands.command(name="stop", description="Stop rotating statuses")
    async def stop_rotation(self, interaction: discord.Interaction):
        if not self.scheduler.is_running():
            await interaction.response.send_message(
                embed=DiscordHelpers.info_embed("Status Rotation", "The rotation is not running."),
                ephemeral=True
            )
            return

        self.scheduler.stop()
        await interaction.response.send_message(
            embed=DiscordHelpers.success_embed(
                "Status Rotation Stopped", "The current status stays until a new one is set."
            ),
            ephemeral=True
        )

    @app_commands.command(name="info", description="Show the rotation state and settings")
    async def info(self, interaction: discord.Interaction):
        config = self.store.read_config()
        running = self.scheduler.is_running()

        embed = DiscordHelpers.info_embed("Status Rotation")
        embed.add_field(name="State", value="🟢 Running" if running else "⚪ Stopped")
        embed.add_field(
            name="Interval",
            value=f"{self.scheduler.interval_seconds:g}s" if running
            else f"{max(config.interval_seconds, MIN_INTERVAL_SECONDS)}s"
        )
        embed.add_field(name="Order", value="Random" if config.randomize else "Sequential")
        embed.add_field(name="Auto-start", value="On" if config.auto_start else "Off")
        embed.add_field(name="Category", value=(self.scheduler.category if running else config.active_category) or "All")
        embed.add_field(name="Statuses", value=str(len(config.steps)))

        step = self.scheduler.current_step
        if running and step:
            embed.add_field(name="Current", value=step.display(), inline=False)

        await interaction.response.send_message(embed=embed, ephemeral=True)

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    @app_commands.command(name="list", description="List configured statuses")
    @app_commands.describe(category="Only list statuses in this category")
    async def list_steps(self, interaction: discord.Interaction, category: Optional[str] = None):
        category = normalize_category(category)
        config = self.store.read_config()
        steps = config.filter_steps(category)

        current = None
        if self.scheduler.is_running() and self.scheduler.category == category:
            current = self.scheduler.current_index

        title = f"Statuses · {category}" if category else "Statuses"
        await interaction.response.send_message(
            embed=DiscordHelpers.info_embed(title, DiscordHelpers.format_step_list(steps, current)),
            ephemeral=True
        )

    @app_commands.command(name="add", description="Add a status to the rotation")
    @app_commands.describe(
        text="Status text, may include a custom emoji like <:name:id>",
        category="Optional category tag",
        emoji="A unicode emoji or custom emoji to show",
        presence="Presence state to switch to with this status"
    )
    @app_commands.choices(presence=PRESENCE_CHOICES)
    async def add_step(self, interaction: discord.Interaction, text: str,
                       category: Optional[str] = None, emoji: Optional[str] = None,
                       presence: Optional[app_commands.Choice[str]] = None):
        if category and not Validators.is_valid_category(category):
            await interaction.response.send_message(
                embed=DiscordHelpers.error_embed(
                    "Invalid Category",
                    f"Use up to {Validators.MAX_CATEGORY_LENGTH} letters, numbers, spaces, dashes or underscores."
                ),
                ephemeral=True
            )
            return

        if emoji and Validators.is_custom_emoji(emoji):
            text = f"{emoji.strip()} {text}"
            emoji = None

        step = parse_status_input(
            text,
            category=category,
            presence_state=PresenceState.parse(presence.value) if presence else None,
            unicode_emoji=emoji
        )

        if not Validators.is_valid_status_text(step.text):
            await interaction.response.send_message(
                embed=DiscordHelpers.error_embed(
                    "Status Too Long", f"Statuses can be at most {Validators.MAX_STATUS_LENGTH} characters."
                ),
                ephemeral=True
            )
            return

        if not self.store.add_step(step):
            await interaction.response.send_message(
                embed=DiscordHelpers.error_embed("Save Failed", "Could not save the status list."),
                ephemeral=True
            )
            return

        log.info(f"{interaction.user} added status {step.display()!r}")
        await interaction.response.send_message(
            embed=DiscordHelpers.success_embed("Status Added", step.display()),
            ephemeral=True
        )

    @app_commands.command(name="remove", description="Remove a status by its number in /status list")
    @app_commands.describe(index="Number shown in /status list")
    async def remove_step(self, interaction: discord.Interaction, index: app_commands.Range[int, 1]):
        removed = self.store.remove_step(index - 1)
        if removed is None:
            await interaction.response.send_message(
                embed=DiscordHelpers.error_embed("Not Found", f"There is no status #{index}."),
                ephemeral=True
            )
            return

        log.info(f"{interaction.user} removed status {removed.display()!r}")
        await interaction.response.send_message(
            embed=DiscordHelpers.success_embed("Status Deleted", removed.display()),
            ephemeral=True
        )

    @app_commands.command(name="edit", description="Change a status; options left out keep their value")
    @app_commands.describe(
        index="Number shown in /status list",
        text="New status text, may include a custom emoji like <:name:id>",
        category="New category tag",
        emoji="New unicode emoji or custom emoji",
        presence="New presence state"
    )
    @app_commands.choices(presence=PRESENCE_CHOICES)
    async def edit_step(self, interaction: discord.Interaction, index: app_commands.Range[int, 1],
                        text: Optional[str] = None, category: Optional[str] = None,
                        emoji: Optional[str] = None,
                        presence: Optional[app_commands.Choice[str]] = None):
        steps = self.store.read_steps()
        if index > len(steps):
            await interaction.response.send_message(
                embed=DiscordHelpers.error_embed("Not Found", f"There is no status #{index}."),
                ephemeral=True
            )
            return

        if category and not Validators.is_valid_category(category):
            await interaction.response.send_message(
                embed=DiscordHelpers.error_embed("Invalid Category", "That category name is not allowed."),
                ephemeral=True
            )
            return

        existing = steps[index - 1]
        raw = text if text is not None else existing.text
        if emoji and Validators.is_custom_emoji(emoji):
            raw = f"{emoji.strip()} {raw}"
            emoji = None

        step = parse_status_input(
            raw,
            category=category if category else existing.category,
            presence_state=PresenceState.parse(presence.value) if presence else existing.presence_state,
            unicode_emoji=emoji
        )
        if step.emoji is None:
            step.emoji = existing.emoji

        if not Validators.is_valid_status_text(step.text):
            await interaction.response.send_message(
                embed=DiscordHelpers.error_embed(
                    "Status Too Long", f"Statuses can be at most {Validators.MAX_STATUS_LENGTH} characters."
                ),
                ephemeral=True
            )
            return

        if not self.store.update_step(index - 1, step):
            await interaction.response.send_message(
                embed=DiscordHelpers.error_embed("Save Failed", "Could not save the status list."),
                ephemeral=True
            )
            return

        log.info(f"{interaction.user} edited status #{index} to {step.display()!r}")
        await interaction.response.send_message(
            embed=DiscordHelpers.success_embed("Status Updated", step.display()),
            ephemeral=True
        )

    @app_commands.command(name="move", description="Move a status to another position")
    @app_commands.describe(source="Current number", destination="New number")
    async def move_step(self, interaction: discord.Interaction,
                        source: app_commands.Range[int, 1], destination: app_commands.Range[int, 1]):
        if not self.store.move_step(source - 1, destination - 1):
            await interaction.response.send_message(
                embed=DiscordHelpers.error_embed("Invalid Position", "Both numbers must match /status list."),
                ephemeral=True
            )
            return

        await interaction.response.send_message(
            embed=DiscordHelpers.success_embed("Status Moved", f"#{source} → #{destination}"),
            ephemeral=True
        )

    @app_commands.command(name="categories", description="Show status categories")
    async def categories(self, interaction: discord.Interaction):
        config = self.store.read_config()
        names = config.categories()

        if not names:
            description = "*No categories yet. Tag a status with one via `/status add`.*"
        else:
            description = "\n".join(
                f"`{name}` · {len(config.filter_steps(name))} statuses" for name in names
            )

        await interaction.response.send_message(
            embed=DiscordHelpers.info_embed("Categories", description),
            ephemeral=True
        )

    @app_commands.command(name="rename_category", description="Rename or clear a category")
    @app_commands.describe(old="Category to rename", new="New name, leave empty to remove the tag")
    async def rename_category(self, interaction: discord.Interaction, old: str, new: Optional[str] = None):
        if new and not Validators.is_valid_category(new):
            await interaction.response.send_message(
                embed=DiscordHelpers.error_embed("Invalid Category", "That category name is not allowed."),
                ephemeral=True
            )
            return

        if normalize_category(new) is None:
            changed = self.store.clear_category(old)
        else:
            changed = self.store.rename_category(old, new)
        if not changed:
            await interaction.response.send_message(
                embed=DiscordHelpers.error_embed("Not Found", f"No statuses are in `{normalize_category(old)}`."),
                ephemeral=True
            )
            return

        result = f"renamed to `{normalize_category(new)}`" if new else "removed"
        await interaction.response.send_message(
            embed=DiscordHelpers.success_embed("Category Updated", f"{changed} statuses {result}."),
            ephemeral=True
        )

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    @app_commands.command(name="interval", description="Seconds between status changes")
    @app_commands.describe(seconds=f"At least {MIN_INTERVAL_SECONDS} seconds")
    async def set_interval(self, interaction: discord.Interaction,
                           seconds: app_commands.Range[int, MIN_INTERVAL_SECONDS, MAX_INTERVAL_SECONDS]):
        self.store.set_interval(seconds)
        await interaction.response.send_message(
            embed=DiscordHelpers.success_embed("Interval Updated", f"Statuses change every {seconds}s."),
            ephemeral=True
        )

    @app_commands.command(name="randomize", description="Pick statuses at random instead of in order")
    async def set_randomize(self, interaction: discord.Interaction, enabled: bool):
        self.store.set_randomize(enabled)
        await interaction.response.send_message(
            embed=DiscordHelpers.success_embed(
                "Order Updated", "Statuses are picked at random." if enabled else "Statuses rotate in order."
            ),
            ephemeral=True
        )

    @app_commands.command(name="autostart", description="Start the rotation when the bot connects")
    async def set_auto_start(self, interaction: discord.Interaction, enabled: bool):
        self.store.set_auto_start(enabled)
        await interaction.response.send_message(
            embed=DiscordHelpers.success_embed("Auto-start " + ("Enabled" if enabled else "Disabled")),
            ephemeral=True
        )

    async def cog_app_command_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError):
        original = getattr(error, 'original', error)
        if isinstance(error, app_commands.CheckFailure):
            return

        log.error(f"Error in /status {interaction.command.name if interaction.command else '?'}: {original}")
        embed = DiscordHelpers.error_embed("Unexpected Error", "Something went wrong while updating the rotation.")
        try:
            if interaction.response.is_done():
                await interaction.followup.send(embed=embed, ephemeral=True)
            else:
                await interaction.response.send_message(embed=embed, ephemeral=True)
        except discord.HTTPException:
            log.error("Failed to send error message to user")


async def setup(bot):
    await bot.add_cog(StatusRotationCog(
        bot,
        scheduler=bot.scheduler,
        store=bot.step_store,
        permissions=PermissionChecker(bot.manager_roles)
    ))
