import re
from typing import Optional


class Validators:
    """Input validation for status commands."""

    # Discord's limit for custom status text
    MAX_STATUS_LENGTH = 128
    MAX_CATEGORY_LENGTH = 32

    CATEGORY_REGEX = re.compile(r'^[\w\- ]+$')
    CUSTOM_EMOJI_REGEX = re.compile(r'^<a?:[A-Za-z0-9_]{2,32}:\d{17,20}>$')

    @classmethod
    def is_valid_status_text(cls, text: Optional[str]) -> bool:
        """Status text may be empty (emoji only) but not too long."""
        if text is None:
            return True
        return isinstance(text, str) and len(text) <= cls.MAX_STATUS_LENGTH

    @classmethod
    def is_valid_category(cls, category: Optional[str]) -> bool:
        if not category or not isinstance(category, str):
            return False
        category = category.strip()
        return 0 < len(category) <= cls.MAX_CATEGORY_LENGTH and bool(cls.CATEGORY_REGEX.match(category))

    @classmethod
    def is_custom_emoji(cls, value: Optional[str]) -> bool:
        if not value or not isinstance(value, str):
            return False
        return bool(cls.CUSTOM_EMOJI_REGEX.match(value.strip()))

    @classmethod
    def is_valid_discord_id(cls, id_str: str) -> bool:
        """Validate Discord ID format."""
        try:
            discord_id = int(id_str)
            return 17 <= len(str(discord_id)) <= 20
        except (TypeError, ValueError):
            return False
