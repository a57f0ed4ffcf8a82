"""
scheduler.py — Animation Scheduler
===================================
The scheduler owns the running step sequence and decides WHEN the next
Step is consumed.  It never interprets Steps; every consumed Step goes to
the `on_step` callback, in the order the emitter produced it.

Modes (fixed at construction):
    TIMED   one Step per elapsed interval, checked on tick()
    MANUAL  only step_once() consumes; tick() does nothing

State machine:
    IDLE     →  start()       →  RUNNING
    RUNNING  →  pause()       →  PAUSED
    PAUSED   →  resume()      →  RUNNING
    RUNNING  →  terminal step →  FINISHED
    any      →  cancel()      →  CANCELLED

Thread safety:
  This class is NOT thread-safe and starts no threads.  Timed playback
  advances only when something calls tick(): a poll from the browser,
  a driver loop, or a test with a fake clock.
"""

import logging
import time
from enum import Enum
from typing import Callable, Iterable, Iterator, Optional

from algorithms.step import Step

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States / modes
# ---------------------------------------------------------------------------
class SchedulerState(Enum):
    IDLE      = "idle"
    RUNNING   = "running"
    PAUSED    = "paused"
    FINISHED  = "finished"
    CANCELLED = "cancelled"


class SchedulerMode(Enum):
    TIMED  = "timed"
    MANUAL = "manual"


# ---------------------------------------------------------------------------
# Speed presets (milliseconds per step)
# ---------------------------------------------------------------------------
SPEED_PRESETS = {
    "slow":   1000.0,    # teaching mode
    "medium": 400.0,
    "fast":   150.0,     # demo mode
    "turbo":  50.0,
}

MIN_INTERVAL_MS = 20.0


class SchedulerMisuse(RuntimeError):
    """An operation that makes no sense in the scheduler's current state."""


# ---------------------------------------------------------------------------
# AnimationScheduler
# ---------------------------------------------------------------------------
class AnimationScheduler:
    """
    Attributes:
        state        : Current SchedulerState.
        mode         : SchedulerMode, fixed for the scheduler's lifetime.
        interval_ms  : Milliseconds between timed steps.
        consumed     : Steps delivered in the current run.
        on_step      : callback(Step) fired for every consumed Step.
                       The controller folds state and re-renders here.
    """

    def __init__(
        self,
        on_step: Callable[[Step], None],
        mode: SchedulerMode = SchedulerMode.TIMED,
        clock: Callable[[], float] = time.monotonic,
        min_interval_ms: float = MIN_INTERVAL_MS,
    ):
        self.on_step:      Callable[[Step], None] = on_step
        self.mode:         SchedulerMode          = mode
        self.state:        SchedulerState         = SchedulerState.IDLE
        self.interval_ms:  float                  = SPEED_PRESETS["medium"]
        self.consumed:     int                    = 0
        self.min_interval_ms = min_interval_ms

        self._clock = clock
        self._iterator:   Optional[Iterator[Step]] = None
        self._generation: int   = 0        # bumped by start()/cancel(); stale runs deliver nothing
        self._last_tick:  float = 0.0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self, emitter: Iterable[Step], interval_ms: Optional[float] = None) -> None:
        """Begin a fresh run.  Any previous run is cancelled first."""
        if self.state in (SchedulerState.RUNNING, SchedulerState.PAUSED):
            self.cancel()
        if interval_ms is not None:
            self.set_interval(interval_ms)
        self._generation += 1
        self._iterator    = iter(emitter)
        self.consumed     = 0
        self.state        = SchedulerState.RUNNING
        self._last_tick   = self._clock()
        logger.debug("scheduler run %d started (%s, %.0f ms)", self._generation, self.mode.value, self.interval_ms)

    def cancel(self) -> None:
        """Stop the run for good; the remaining steps are discarded."""
        if self.state in (SchedulerState.IDLE, SchedulerState.CANCELLED):
            return
        self._generation += 1
        self._close()
        self.state = SchedulerState.CANCELLED
        logger.debug("scheduler cancelled after %d step(s)", self.consumed)

    # ------------------------------------------------------------------
    # Play / Pause
    # ------------------------------------------------------------------
    def pause(self) -> None:
        if self.state == SchedulerState.PAUSED:
            return
        if self.state != SchedulerState.RUNNING:
            raise SchedulerMisuse(f"cannot pause a {self.state.value} scheduler")
        self.state = SchedulerState.PAUSED

    def resume(self) -> None:
        if self.state == SchedulerState.RUNNING:
            return
        if self.state != SchedulerState.PAUSED:
            raise SchedulerMisuse(f"cannot resume a {self.state.value} scheduler")
        self.state      = SchedulerState.RUNNING
        self._last_tick = self._clock()      # interval restarts from now

    # ------------------------------------------------------------------
    # Step driving
    # ------------------------------------------------------------------
    def step_once(self) -> Optional[Step]:
        """
        Consume exactly one Step.  Allowed while RUNNING in MANUAL mode
        and while PAUSED in either mode; the state is left as it was
        unless the step is terminal.
        """
        if self.state == SchedulerState.PAUSED:
            return self._advance()
        if self.state == SchedulerState.RUNNING and self.mode == SchedulerMode.MANUAL:
            return self._advance()
        if self.state == SchedulerState.RUNNING:
            raise SchedulerMisuse("step_once needs manual mode or a paused run")
        raise SchedulerMisuse(f"cannot step a {self.state.value} scheduler")

    def tick(self, now: Optional[float] = None) -> bool:
        """
        Call periodically.  If running in TIMED mode and at least one
        interval has elapsed since the last consumed step, consume ONE
        step.  Missed intervals are not replayed.  Returns True if a step
        was taken.
        """
        if self.mode != SchedulerMode.TIMED or self.state != SchedulerState.RUNNING:
            return False
        now = self._clock() if now is None else now
        if (now - self._last_tick) * 1000.0 < self.interval_ms:
            return False
        self._last_tick = now
        return self._advance() is not None

    def run_to_end(self) -> int:
        """Consume everything that is left, ignoring the interval."""
        taken = 0
        while self.state in (SchedulerState.RUNNING, SchedulerState.PAUSED):
            if self._advance() is None:
                break
            taken += 1
        return taken

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_interval(self, interval_ms: float) -> None:
        """Takes effect on the next tick."""
        self.interval_ms = max(self.min_interval_ms, float(interval_ms))

    def set_speed(self, preset: str) -> None:
        if preset not in SPEED_PRESETS:
            raise ValueError(f"unknown speed preset {preset!r}; choose from {', '.join(SPEED_PRESETS)}")
        self.set_interval(SPEED_PRESETS[preset])

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def is_active(self) -> bool:
        return self.state in (SchedulerState.RUNNING, SchedulerState.PAUSED)

    @property
    def generation(self) -> int:
        return self._generation

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _advance(self) -> Optional[Step]:
        """Pull one Step and deliver it, unless the run went stale meanwhile."""
        if self._iterator is None:
            return None
        generation = self._generation
        try:
            step = next(self._iterator)
        except StopIteration:
            self._iterator = None
            self.state = SchedulerState.FINISHED
            return None
        if generation != self._generation:
            return None
        self.consumed += 1
        if step.is_terminal:
            self._close()
            self.state = SchedulerState.FINISHED
        self.on_step(step)
        return step

    def _close(self) -> None:
        close = getattr(self._iterator, "close", None)
        if close is not None:
            close()
        self._iterator = None

    def __repr__(self) -> str:
        return f"AnimationScheduler({self.mode.value}, {self.state.value}, consumed={self.consumed})"
