import discord
from typing import List, Optional

MAX_LIST_LINES = 25


class DiscordHelpers:
    """Embed builders shared by the cog and the notifier."""

    @staticmethod
    def create_safe_embed(title: str = None, description: str = None,
                          color: int = None, **kwargs) -> discord.Embed:
        """Create embed with safe defaults."""
        embed = discord.Embed(
            title=title,
            description=description,
            color=color or discord.Color.blue()
        )

        if kwargs.get('footer'):
            embed.set_footer(text=kwargs['footer'])

        if kwargs.get('timestamp'):
            embed.timestamp = discord.utils.utcnow()

        return embed

    @classmethod
    def success_embed(cls, title: str, description: str = None, **kwargs) -> discord.Embed:
        return cls.create_safe_embed(f"✅ {title}", description, discord.Color.green(), **kwargs)

    @classmethod
    def error_embed(cls, title: str, description: str = None, **kwargs) -> discord.Embed:
        return cls.create_safe_embed(f"❌ {title}", description, discord.Color.red(), **kwargs)

    @classmethod
    def warning_embed(cls, title: str, description: str = None, **kwargs) -> discord.Embed:
        return cls.create_safe_embed(f"⚠️ {title}", description, discord.Color.orange(), **kwargs)

    @classmethod
    def info_embed(cls, title: str, description: str = None, **kwargs) -> discord.Embed:
        return cls.create_safe_embed(title, description, discord.Color.blue(), **kwargs)

    @staticmethod
    def format_step_list(steps, current: Optional[int] = None) -> str:
        """Numbered step listing; the entry at ``current`` is marked."""
        if not steps:
            return "*No statuses yet. Add one with `/status add`.*"

        lines: List[str] = []
        for position, step in enumerate(steps[:MAX_LIST_LINES]):
            marker = "▶️" if position == current else f"`{position + 1}.`"
            line = f"{marker} {step.display()}"
            if step.category:
                line += f"  · `{step.category}`"
            if step.presence_state:
                line += f"  · {step.presence_state.value}"
            lines.append(line)

        hidden = len(steps) - MAX_LIST_LINES
        if hidden > 0:
            lines.append(f"*…and {hidden} more*")
        return "\n".join(lines)
