"""
Error types raised by the status rotation.
"""

from typing import Optional


class RotationError(Exception):
    """Base class for status rotation failures."""


class EmptyStepSet(RotationError):
    """No steps are available (optionally within a category)."""

    def __init__(self, category: Optional[str] = None):
        self.category = category
        if category:
            super().__init__(f'No status messages in "{category}" category')
        else:
            super().__init__("No status messages configured")


class TransientApplyFailure(RotationError):
    """A single apply attempt failed and may be retried."""

    def __init__(self, step, attempt: int):
        self.step = step
        self.attempt = attempt
        super().__init__(f"Apply attempt {attempt} failed for {step.display()!r}")


class ExhaustedRetries(RotationError):
    """Every apply attempt for a step failed."""

    def __init__(self, step, attempts: int):
        self.step = step
        self.attempts = attempts
        super().__init__(f"Failed to apply {step.display()!r} after {attempts} attempts")


class InitialApplyFailed(RotationError):
    """The first step of a run could not be applied, so the run never started."""

    def __init__(self, step):
        self.step = step
        super().__init__(f"Failed to set initial status {step.display()!r}")


class ConfigReadFailure(RotationError):
    """Persisted rotation settings could not be decoded."""
