import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from enum import Enum


DEFAULT_STEPS = [{"text": "Hey there!"}]
DEFAULT_INTERVAL_SECONDS = 10

CUSTOM_EMOJI_REGEX = re.compile(r'<a?:([^:]+):(\d+)>')


class PresenceState(Enum):
    ONLINE = "online"
    IDLE = "idle"
    DND = "dnd"
    INVISIBLE = "invisible"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["PresenceState"]:
        """Return the matching state, or None for missing/unknown values."""
        if not value:
            return None
        try:
            return cls(str(value).lower())
        except ValueError:
            return None


def normalize_category(category: Optional[str]) -> Optional[str]:
    """Strip and lower-case a category tag. Blank tags become None."""
    if category is None:
        return None
    category = str(category).strip().lower()
    return category or None


@dataclass
class StepEmoji:
    """Emoji shown next to the status text."""
    name: str
    id: Optional[int] = None
    animated: bool = False

    @property
    def is_custom(self) -> bool:
        return self.id is not None

    def to_markup(self) -> str:
        """Render the emoji the way Discord messages show it."""
        if not self.is_custom:
            return self.name
        prefix = "a" if self.animated else ""
        return f"<{prefix}:{self.name}:{self.id}>"


@dataclass
class StatusStep:
    """One entry of the status rotation."""
    text: str = ""
    emoji: Optional[StepEmoji] = None
    category: Optional[str] = None
    presence_state: Optional[PresenceState] = None

    def __post_init__(self):
        self.category = normalize_category(self.category)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StatusStep":
        """Build a step from its stored JSON object."""
        emoji = None
        emoji_name = data.get("emoji_name")
        if emoji_name:
            emoji_id = data.get("emoji_id")
            emoji = StepEmoji(
                name=str(emoji_name),
                id=_decode_emoji_id(emoji_id),
                animated=bool(data.get("animated", False))
            )

        return cls(
            text=str(data.get("text") or ""),
            emoji=emoji,
            category=data.get("category"),
            presence_state=PresenceState.parse(data.get("status"))
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the stored JSON object, omitting unset keys."""
        data: Dict[str, Any] = {"text": self.text}

        if self.emoji:
            data["emoji_name"] = self.emoji.name
            if self.emoji.id is not None:
                data["emoji_id"] = str(self.emoji.id)
            if self.emoji.animated:
                data["animated"] = True

        if self.category:
            data["category"] = self.category

        if self.presence_state:
            data["status"] = self.presence_state.value

        return data

    def display(self) -> str:
        """Short human-readable form used in listings."""
        parts = []
        if self.emoji:
            parts.append(self.emoji.to_markup())
        if self.text:
            parts.append(self.text)
        return " ".join(parts) or "*(emoji only)*"


def _decode_emoji_id(value: Any) -> Optional[int]:
    # "" and "0" are the transport's "no custom emoji" sentinels
    if value in (None, "", "0", 0):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_status_input(raw: str, category: Optional[str] = None,
                       presence_state: Optional[PresenceState] = None,
                       unicode_emoji: Optional[str] = None) -> StatusStep:
    """Turn user input like ``<a:wave:123> hello`` into a StatusStep.

    A single leading backslash is dropped so users can escape Discord's own
    emoji rendering. The first custom emoji markup is pulled out of the text;
    ``unicode_emoji`` is used only when no custom emoji was found.
    """
    clean = raw[1:] if raw.startswith("\\") else raw
    step = StatusStep(text=clean, category=category, presence_state=presence_state)

    match = CUSTOM_EMOJI_REGEX.search(clean)
    if match:
        step.emoji = StepEmoji(
            name=match.group(1),
            id=int(match.group(2)),
            animated="<a:" in clean
        )
        step.text = CUSTOM_EMOJI_REGEX.sub("", clean, count=1).strip()
    elif unicode_emoji and unicode_emoji.strip():
        step.emoji = StepEmoji(name=unicode_emoji.strip())

    return step


@dataclass
class RotationConfig:
    """Persisted rotation settings, as read on one access."""
    steps: List[StatusStep] = field(default_factory=list)
    interval_seconds: int = DEFAULT_INTERVAL_SECONDS
    randomize: bool = False
    auto_start: bool = True
    active_category: Optional[str] = None

    def filter_steps(self, category: Optional[str] = None) -> List[StatusStep]:
        """Steps tagged with ``category``, or every step when it is None."""
        category = normalize_category(category)
        if category is None:
            return list(self.steps)
        return [step for step in self.steps if step.category == category]

    def categories(self) -> List[str]:
        """Distinct categories in the order they first appear."""
        seen: List[str] = []
        for step in self.steps:
            if step.category and step.category not in seen:
                seen.append(step.category)
        return seen
