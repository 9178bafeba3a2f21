"""
Status rotation scheduler.

Owns the rotation lifecycle: applies the first step on start, then advances
through the configured steps on a repeating discord.py task loop until it is
stopped or an apply keeps failing.
"""

import asyncio
import random
import time
from typing import Awaitable, Callable, Optional

from discord.ext import tasks

from ..core.errors import EmptyStepSet, ExhaustedRetries, InitialApplyFailed, TransientApplyFailure
from ..models.status_step import StatusStep, normalize_category
from .notifier import Notice, NoticeKind, Notifier
from .presence_applier import PresenceApplier
from .step_store import StepStore
from ..utils.logger import get_logger

log = get_logger("scheduler")

MIN_INTERVAL_SECONDS = 5
THROTTLE_SECONDS = 2.0
MAX_ATTEMPTS = 3
BACKOFF_STEP_SECONDS = 0.5


def effective_interval(seconds: float) -> float:
    """Timer period for a requested interval, never below the 5 second floor."""
    return max(seconds, MIN_INTERVAL_SECONDS)


class RotationScheduler:
    """Rotates status steps on a timer.

    Only one run is active per instance. ``start`` replaces any running
    rotation, ``stop`` leaves the last applied status in place.
    """

    def __init__(self, store: StepStore, applier: PresenceApplier, notifier: Notifier, *,
                 clock: Callable[[], float] = time.monotonic,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
                 rng: Optional[random.Random] = None):
        self.store = store
        self.applier = applier
        self.notifier = notifier
        self._clock = clock
        self._sleep = sleep
        self._rng = rng or random.Random()

        self._timer: Optional[tasks.Loop] = None
        self._period: Optional[float] = None
        self._category: Optional[str] = None
        self._current_index = 0
        self._current_step: Optional[StatusStep] = None
        self._last_update: Optional[float] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def is_running(self) -> bool:
        return self._timer is not None

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def category(self) -> Optional[str]:
        return self._category

    @property
    def interval_seconds(self) -> Optional[float]:
        """Effective timer period, or None while stopped."""
        return self._period

    @property
    def current_step(self) -> Optional[StatusStep]:
        """The step most recently applied successfully."""
        return self._current_step

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self, category: Optional[str] = None) -> None:
        """Start (or restart) a rotation, optionally limited to one category.

        Raises EmptyStepSet or InitialApplyFailed after notifying.
        """
        category = normalize_category(category)
        config = self.store.read_config()

        if not config.steps:
            await self._notify(NoticeKind.EMPTY, "Add some status animations in settings!")
            raise EmptyStepSet()

        steps = config.filter_steps(category)
        if not steps:
            await self._notify(NoticeKind.CATEGORY_EMPTY, f'No status messages in "{category}" category!')
            raise EmptyStepSet(category)

        self._cancel_timer()
        self._current_index = 0
        self._category = category

        try:
            await self._apply_with_retry(steps[0])
        except ExhaustedRetries as e:
            log.error(str(e))
            await self._notify(NoticeKind.START_FAILED, "Failed to start status animation")
            raise InitialApplyFailed(steps[0]) from e

        self._arm(config.interval_seconds, category)
        log.info(
            f"Status rotation started with {len(steps)} statuses"
            f"{f' in category {category!r}' if category else ''}, every {self._period}s"
        )
        await self._notify(NoticeKind.STARTED, "Status animation started!")

    def stop(self) -> None:
        """Stop rotating. Safe to call when not running."""
        if self._timer is None:
            return
        self._cancel_timer()
        log.info("Status rotation stopped")

    def reconfigure_interval(self, seconds: float) -> None:
        """Re-arm the running timer with a new period, keeping progress and category."""
        if self._timer is None:
            return
        self._arm(seconds, self._category)
        log.info(f"Status rotation interval changed to {self._period}s")

    async def advance(self, category: Optional[str] = None) -> None:
        """Apply the next step. Timer callback, never raises."""
        now = self._clock()
        if self._last_update is not None and now - self._last_update < THROTTLE_SECONDS:
            log.debug("Skipping tick, last update was too recent")
            return
        self._last_update = now

        category = normalize_category(category)
        try:
            config = self.store.read_config()
            steps = config.filter_steps(category)

            if not steps:
                log.info("No statuses left to rotate, stopping")
                self._cancel_timer()
                return

            if config.randomize:
                index = self._rng.randrange(len(steps))
            else:
                index = (self._current_index + 1) % len(steps)
            self._current_index = index

            await self._apply_with_retry(steps[index])
        except ExhaustedRetries as e:
            log.error(f"{e}, stopping rotation")
            await self._abort()
        except Exception:
            log.exception("Unexpected error while rotating status")
            await self._abort()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _apply_with_retry(self, step: StatusStep) -> None:
        for attempt in range(1, MAX_ATTEMPTS + 1):
            try:
                applied = await self.applier.apply(step)
            except Exception as e:
                log.warning(f"Applier raised: {e}")
                applied = False

            if applied:
                self._current_step = step
                return

            log.warning(str(TransientApplyFailure(step, attempt)))
            if attempt < MAX_ATTEMPTS:
                await self._sleep(attempt * BACKOFF_STEP_SECONDS)

        raise ExhaustedRetries(step, MAX_ATTEMPTS)

    async def _abort(self) -> None:
        self._cancel_timer()
        await self._notify(NoticeKind.ABORTED, "Status animation stopped due to an error")

    async def _tick(self, category: Optional[str]) -> None:
        # tasks.Loop runs its first iteration right away; the first advance belongs one period later
        if self._timer is None or self._timer.current_loop == 0:
            return
        await self.advance(category)

    def _arm(self, seconds: float, category: Optional[str]) -> None:
        self._cancel_timer()
        period = effective_interval(seconds)
        timer = tasks.loop(seconds=period)(self._tick)
        timer.start(category)
        self._timer = timer
        self._period = period

    def _cancel_timer(self) -> None:
        timer, self._timer = self._timer, None
        self._period = None
        if timer is None:
            return

        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None

        # Cancelling our own task would interrupt the tick before it finishes
        if current is not None and timer.get_task() is current:
            timer.stop()
        else:
            timer.cancel()

    async def _notify(self, kind: NoticeKind, message: str) -> None:
        try:
            await self.notifier.notify(Notice(kind, message))
        except Exception:
            log.exception(f"Notifier failed for {kind.value} notice")
