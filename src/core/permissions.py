import discord
from typing import Iterable, List


class PermissionChecker:
    """Decides who may manage the status rotation."""

    DEFAULT_MANAGER_ROLES = ["Moderators", "Admins"]

    def __init__(self, manager_roles: Iterable[str] = None):
        self.manager_roles: List[str] = list(manager_roles or self.DEFAULT_MANAGER_ROLES)

    @staticmethod
    def has_admin_permissions(user: discord.Member) -> bool:
        """Check if user has administrator permissions."""
        permissions = getattr(user, "guild_permissions", None)
        return bool(permissions and permissions.administrator)

    def is_rotation_manager(self, user: discord.Member) -> bool:
        """Managers hold a configured role or can manage the guild."""
        return any(
            role.name in self.manager_roles or role.permissions.manage_guild
            for role in getattr(user, "roles", [])
        )

    def can_manage_rotation(self, user: discord.Member) -> bool:
        return self.has_admin_permissions(user) or self.is_rotation_manager(user)

    async def check_interaction(self, interaction: discord.Interaction) -> bool:
        """Check permissions and respond with an error if insufficient."""
        if self.can_manage_rotation(interaction.user):
            return True

        await interaction.response.send_message(
            "You don't have permission to manage the status rotation. "
            f"Ask an administrator or someone with one of these roles: {', '.join(self.manager_roles)}.",
            ephemeral=True
        )
        return False
