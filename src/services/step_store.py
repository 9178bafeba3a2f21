from typing import Any, Callable, Dict, List, Optional

from ..core.errors import ConfigReadFailure
from ..core.storage import StorageManager
from ..models.status_step import (
    DEFAULT_INTERVAL_SECONDS,
    DEFAULT_STEPS,
    RotationConfig,
    StatusStep,
    normalize_category,
)
from ..utils.logger import get_logger

log = get_logger("step_store")

ChangeCallback = Callable[[str], None]


class StepStore:
    """Persisted rotation settings backed by a JSON file.

    The scheduler only reads through this class; writes come from the slash
    commands. Subscribers are told which key changed after every write.
    """

    def __init__(self, storage: StorageManager, filename: str = "rotation.json"):
        self.storage = storage
        self.filename = filename
        self._subscribers: List[ChangeCallback] = []

    def _defaults(self) -> Dict[str, Any]:
        return {
            "steps": [dict(step) for step in DEFAULT_STEPS],
            "interval": DEFAULT_INTERVAL_SECONDS,
            "randomize": False,
            "auto_start": True,
            "active_category": None
        }

    def _load_raw(self) -> Dict[str, Any]:
        data = self.storage.load(self.filename, None)
        if data is None:
            return self._defaults()
        if not isinstance(data, dict):
            log.warning(f"{self.filename} is not a JSON object, treating it as empty")
            return {"steps": []}
        return data

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    def read_config(self) -> RotationConfig:
        data = self._load_raw()
        return RotationConfig(
            steps=self._parse_steps(data.get("steps")),
            interval_seconds=self._parse_interval(data.get("interval")),
            randomize=bool(data.get("randomize", False)),
            auto_start=bool(data.get("auto_start", True)),
            active_category=normalize_category(data.get("active_category"))
        )

    def read_steps(self) -> List[StatusStep]:
        return self._parse_steps(self._load_raw().get("steps"))

    def read_interval(self) -> int:
        return self._parse_interval(self._load_raw().get("interval"))

    def read_randomize(self) -> bool:
        return bool(self._load_raw().get("randomize", False))

    def read_auto_start(self) -> bool:
        return bool(self._load_raw().get("auto_start", True))

    def read_active_category(self) -> Optional[str]:
        return normalize_category(self._load_raw().get("active_category"))

    def _parse_steps(self, raw: Any) -> List[StatusStep]:
        try:
            return decode_steps(raw)
        except ConfigReadFailure as e:
            log.warning(f"Ignoring stored steps: {e}")
            return []

    def _parse_interval(self, raw: Any) -> int:
        try:
            return int(raw)
        except (TypeError, ValueError):
            return DEFAULT_INTERVAL_SECONDS

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    def subscribe(self, callback: ChangeCallback) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: ChangeCallback) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def _write(self, key: str, mutate: Callable[[Dict[str, Any]], None]) -> bool:
        data = self._load_raw()
        mutate(data)
        if not self.storage.save(self.filename, data):
            return False

        for callback in list(self._subscribers):
            try:
                callback(key)
            except Exception:
                log.exception(f"Settings subscriber failed for '{key}'")
        return True

    def _write_steps(self, mutate: Callable[[List[StatusStep]], None]) -> bool:
        def apply(data):
            steps = self._parse_steps(data.get("steps"))
            mutate(steps)
            data["steps"] = [step.to_dict() for step in steps]
        return self._write("steps", apply)

    def add_step(self, step: StatusStep) -> bool:
        return self._write_steps(lambda steps: steps.append(step))

    def remove_step(self, index: int) -> Optional[StatusStep]:
        """Remove the step at ``index``. Returns it, or None if out of range."""
        steps = self.read_steps()
        if not 0 <= index < len(steps):
            return None

        removed = steps[index]
        self._write_steps(lambda current: current.pop(index))
        return removed

    def update_step(self, index: int, step: StatusStep) -> bool:
        if not 0 <= index < len(self.read_steps()):
            return False

        def replace(steps):
            steps[index] = step
        return self._write_steps(replace)

    def move_step(self, source: int, destination: int) -> bool:
        count = len(self.read_steps())
        if not (0 <= source < count and 0 <= destination < count):
            return False

        def move(steps):
            steps.insert(destination, steps.pop(source))
        return self._write_steps(move)

    def rename_category(self, old: str, new: Optional[str]) -> int:
        """Retag every step in ``old``; a blank ``new`` clears the tag. Returns the count."""
        old = normalize_category(old)
        new = normalize_category(new)
        matching = [step for step in self.read_steps() if step.category == old]
        if old is None or not matching:
            return 0

        def retag(steps):
            for step in steps:
                if step.category == old:
                    step.category = new
        self._write_steps(retag)

        if self.read_active_category() == old:
            self.set_active_category(new)
        return len(matching)

    def clear_category(self, name: str) -> int:
        return self.rename_category(name, None)

    def set_interval(self, seconds: int) -> bool:
        return self._write("interval", lambda data: data.__setitem__("interval", int(seconds)))

    def set_randomize(self, enabled: bool) -> bool:
        return self._write("randomize", lambda data: data.__setitem__("randomize", bool(enabled)))

    def set_auto_start(self, enabled: bool) -> bool:
        return self._write("auto_start", lambda data: data.__setitem__("auto_start", bool(enabled)))

    def set_active_category(self, category: Optional[str]) -> bool:
        category = normalize_category(category)
        return self._write("active_category", lambda data: data.__setitem__("active_category", category))


def decode_steps(raw: Any) -> List[StatusStep]:
    """Decode the stored step list.

    Raises ConfigReadFailure when the list itself is unusable. Individual
    entries that are not objects are skipped.
    """
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigReadFailure(f"expected a list of steps, got {type(raw).__name__}")

    steps = []
    for position, entry in enumerate(raw):
        if not isinstance(entry, dict):
            log.warning(f"Skipping malformed step #{position + 1}: {entry!r}")
            continue
        steps.append(StatusStep.from_dict(entry))
    return steps
