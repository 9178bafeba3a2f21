import pytest
import discord
from unittest.mock import MagicMock
from src.core.permissions import PermissionChecker


def make_role(name, manage_guild=False):
    role = MagicMock(spec=discord.Role)
    role.name = name
    role.permissions.manage_guild = manage_guild
    return role


def make_member(*roles, admin=False):
    user = MagicMock(spec=discord.Member)
    user.guild_permissions.administrator = admin
    user.roles = list(roles)
    return user


class TestPermissionChecker:

    def test_admin_can_manage(self):
        """Test administrators may manage the rotation."""
        assert PermissionChecker().can_manage_rotation(make_member(admin=True)) is True

    def test_default_manager_role(self):
        """Test the default manager role names are honoured."""
        user = make_member(make_role("Moderators"))

        assert PermissionChecker().can_manage_rotation(user) is True

    def test_custom_manager_roles(self):
        """Test configured role names replace the defaults."""
        checker = PermissionChecker(["Status Team"])

        assert checker.can_manage_rotation(make_member(make_role("Status Team"))) is True
        assert checker.can_manage_rotation(make_member(make_role("Moderators"))) is False

    def test_manage_guild_permission(self):
        """Test Manage Server on any role is enough."""
        user = make_member(make_role("CustomRole", manage_guild=True))

        assert PermissionChecker().is_rotation_manager(user) is True

    def test_regular_member_cannot_manage(self):
        user = make_member(make_role("Member"))

        assert PermissionChecker().can_manage_rotation(user) is False

    def test_user_without_guild_permissions(self):
        """Test a plain User (e.g. in DMs) is refused."""
        user = MagicMock(spec=discord.User)

        assert PermissionChecker().can_manage_rotation(user) is False

    @pytest.mark.asyncio
    async def test_check_interaction_success(self, mock_interaction):
        """Test interaction permission check with valid permissions."""
        result = await PermissionChecker().check_interaction(mock_interaction)

        assert result is True
        mock_interaction.response.send_message.assert_not_called()

    @pytest.mark.asyncio
    async def test_check_interaction_failure(self, mock_interaction):
        """Test interaction permission check with insufficient permissions."""
        mock_interaction.user.guild_permissions.administrator = False
        mock_interaction.user.roles = [make_role("Member")]

        result = await PermissionChecker().check_interaction(mock_interaction)

        assert result is False
        mock_interaction.response.send_message.assert_called_once()
        assert mock_interaction.response.send_message.call_args.kwargs["ephemeral"] is True
