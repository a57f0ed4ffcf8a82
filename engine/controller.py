"""
controller.py — Visualization Controller
=========================================
The controller is the ONLY object a UI talks to.  It ties together one
algorithm's validator, the StepEmitter, an AnimationScheduler and the
VisualizationState fold, and exposes the whole thing as a small finite
state machine:

    IDLE ──submit──▶ VALIDATING ──ok──▶ RUNNING ◀──resume── PAUSED
                         │                 │  └──pause──▶──┘
                         fail              ├── done step ──▶ DONE
                         ▼                 └── failed step ─▶ ERROR
                       ERROR

    any ──reset──▶ IDLE          any ──submit──▶ IDLE ──▶ VALIDATING

Errors never escape as exceptions: bad input and algorithm failures land
in ERROR with an ErrorReport; calls that make no sense in the current
state (pause while idle, …) are logged, recorded as `warning`, and change
nothing.

Every state change (controller or visualization) is pushed to the
subscribers as a fresh ControllerSnapshot.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from algorithms import AlgoInfo, get_algorithm
from algorithms.step import Step, StepKind
from config import SETTINGS, Settings
from engine.scheduler import (
    SPEED_PRESETS,
    AnimationScheduler,
    SchedulerMisuse,
    SchedulerMode,
)
from engine.state import VisualizationState
from validation import validate

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class ControllerState(Enum):
    IDLE       = "idle"
    VALIDATING = "validating"
    RUNNING    = "running"
    PAUSED     = "paused"
    DONE       = "done"
    ERROR      = "error"


class UnknownAlgorithm(KeyError):
    """Raised when a controller is asked for an algorithm that is not registered."""

    def __init__(self, key: str):
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"unknown algorithm {self.key!r}"


INPUT_ERROR       = "InputError"
ALGORITHM_FAILURE = "AlgorithmFailure"


# ---------------------------------------------------------------------------
# Snapshots
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class ErrorReport:
    category: str                   # INPUT_ERROR | ALGORITHM_FAILURE
    kind:     str                   # ValidationErrorKind value or "failed"
    message:  str
    field:    Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"category": self.category, "kind": self.kind, "message": self.message, "field": self.field}


@dataclass(frozen=True)
class ControllerSnapshot:
    controller_state:    ControllerState
    visualization_state: Optional[Dict[str, Any]]
    algorithm:           str
    error:               Optional[ErrorReport] = None
    warning:             Optional[str]         = None
    mode:                str                   = SchedulerMode.TIMED.value
    interval_ms:         float                 = 0.0
    history:             Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "controller_state":    self.controller_state.value,
            "visualization_state": self.visualization_state,
            "algorithm":           self.algorithm,
            "error":               self.error.to_dict() if self.error else None,
            "warning":             self.warning,
            "mode":                self.mode,
            "interval_ms":         self.interval_ms,
            "history":             [list(h) for h in self.history],
        }


Subscriber = Callable[[ControllerSnapshot], None]


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------
class VisualizationController:
    """
    Attributes:
        algorithm : AlgoInfo of the algorithm this controller runs.
        state     : Current ControllerState.
        history   : [(from, to)] of every ControllerState transition.
        scheduler : The AnimationScheduler driving the current run.
    """

    def __init__(
        self,
        algorithm_key: str,
        mode: SchedulerMode = SchedulerMode.TIMED,
        clock: Callable[[], float] = time.monotonic,
        settings: Optional[Settings] = None,
        on_step: Optional[Callable[[Step], None]] = None,
    ):
        info = get_algorithm(algorithm_key)
        if info is None:
            raise UnknownAlgorithm(algorithm_key)
        self.algorithm: AlgoInfo        = info
        self.settings:  Settings        = settings or SETTINGS
        self.state:     ControllerState = ControllerState.IDLE
        self.history:   List[Tuple[ControllerState, ControllerState]] = []

        self.scheduler = AnimationScheduler(
            self._on_step,
            mode=mode,
            clock=clock,
            min_interval_ms=self.settings.min_interval_ms,
        )
        self.scheduler.set_interval(SPEED_PRESETS.get(self.settings.default_speed, SPEED_PRESETS["medium"]))

        self._vis:         Optional[VisualizationState] = None
        self._error:       Optional[ErrorReport]        = None
        self._warning:     Optional[str]                = None
        self._subscribers: List[Subscriber]             = []
        self._step_hook = on_step          # raw Step tap (recorder); subscribers get snapshots

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def submit(self, raw: Optional[Mapping[str, Any]]) -> ControllerSnapshot:
        """Validate `raw` and, if it is usable, start a fresh run."""
        if self.scheduler.is_active:
            logger.info("%s: resubmit cancels the active run", self.algorithm.key)
            self.scheduler.cancel()
        self._vis     = None
        self._error   = None
        self._warning = None
        if self.state != ControllerState.IDLE:
            self._set_state(ControllerState.IDLE)
        self._set_state(ControllerState.VALIDATING)

        result = validate(self.algorithm.validator, raw, self.settings)
        if result.is_failure:
            err = result.error
            self._error = ErrorReport(INPUT_ERROR, err.kind.value, err.message, err.field)
            self._set_state(ControllerState.ERROR)
            return self.current_state()

        self._vis = VisualizationState.initial(result.value)
        self._set_state(ControllerState.RUNNING)
        logger.info("%s: run started (%s mode, %.0f ms/step)",
                    self.algorithm.key, self.scheduler.mode.value, self.scheduler.interval_ms)
        self.scheduler.start(self.algorithm.emitter(result.value))
        return self.current_state()

    def reset(self) -> ControllerSnapshot:
        """Back to IDLE from anywhere; the active run (if any) is cancelled."""
        self.scheduler.cancel()
        self._vis     = None
        self._error   = None
        self._warning = None
        self._set_state(ControllerState.IDLE)
        return self.current_state()

    # ------------------------------------------------------------------
    # Play / Pause / Step
    # ------------------------------------------------------------------
    def pause(self) -> ControllerSnapshot:
        if self.state == ControllerState.PAUSED:
            return self.current_state()
        if self.state != ControllerState.RUNNING:
            return self._misuse(f"pause ignored while {self.state.value}")
        self.scheduler.pause()
        self._set_state(ControllerState.PAUSED)
        return self.current_state()

    def resume(self) -> ControllerSnapshot:
        if self.state == ControllerState.RUNNING:
            return self.current_state()
        if self.state != ControllerState.PAUSED:
            return self._misuse(f"resume ignored while {self.state.value}")
        self.scheduler.resume()
        self._set_state(ControllerState.RUNNING)
        return self.current_state()

    def step_once(self) -> ControllerSnapshot:
        """Consume one step: any mode while PAUSED, MANUAL mode while RUNNING."""
        if self.state not in (ControllerState.RUNNING, ControllerState.PAUSED):
            return self._misuse(f"step ignored while {self.state.value}")
        try:
            self.scheduler.step_once()
        except SchedulerMisuse as exc:
            return self._misuse(str(exc))
        return self.current_state()

    def tick(self, now: Optional[float] = None) -> bool:
        """Advance a TIMED run if its interval has elapsed."""
        if self.state != ControllerState.RUNNING:
            return False
        return self.scheduler.tick(now)

    def run_to_end(self) -> ControllerSnapshot:
        """Drain the active run regardless of mode and interval."""
        if self.state not in (ControllerState.RUNNING, ControllerState.PAUSED):
            return self._misuse(f"run to end ignored while {self.state.value}")
        self.scheduler.run_to_end()
        return self.current_state()

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_speed(self, speed: Union[str, int, float]) -> ControllerSnapshot:
        """Preset name ("slow" … "turbo") or milliseconds per step."""
        if isinstance(speed, str) and speed in SPEED_PRESETS:
            self.scheduler.set_speed(speed)
        elif isinstance(speed, (int, float)) and not isinstance(speed, bool) and speed > 0:
            self.scheduler.set_interval(speed)
        else:
            return self._misuse(f"unknown speed {speed!r}; use {', '.join(SPEED_PRESETS)} or a positive number")
        self._notify()
        return self.current_state()

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------
    def current_state(self) -> ControllerSnapshot:
        return ControllerSnapshot(
            controller_state=self.state,
            visualization_state=self._vis.snapshot() if self._vis is not None else None,
            algorithm=self.algorithm.key,
            error=self._error,
            warning=self._warning,
            mode=self.scheduler.mode.value,
            interval_ms=self.scheduler.interval_ms,
            history=tuple((a.value, b.value) for a, b in self.history),
        )

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register `callback`; the returned function removes it again."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _on_step(self, step: Step) -> None:
        if self._vis is None:
            return
        self._vis.apply(step)
        if self._step_hook is not None:
            self._step_hook(step)
        logger.debug("%s step %d: %s", self.algorithm.key, step.step_number, step.kind.value)
        if step.kind == StepKind.DONE:
            logger.info("%s: run finished after %d step(s)", self.algorithm.key, self._vis.step_count)
            self._set_state(ControllerState.DONE)
        elif step.kind == StepKind.FAILED:
            logger.info("%s: run failed: %s", self.algorithm.key, step.reason)
            self._error = ErrorReport(ALGORITHM_FAILURE, StepKind.FAILED.value, step.reason)
            self._set_state(ControllerState.ERROR)
        else:
            self._notify()

    def _set_state(self, new: ControllerState) -> None:
        old = self.state
        self.state = new
        self.history.append((old, new))
        logger.info("%s: %s → %s", self.algorithm.key, old.value, new.value)
        self._notify()

    def _misuse(self, message: str) -> ControllerSnapshot:
        logger.warning("%s: %s", self.algorithm.key, message)
        self._warning = message
        self._notify()
        return self.current_state()

    def _notify(self) -> None:
        if not self._subscribers:
            return
        snap = self.current_state()
        for callback in list(self._subscribers):
            callback(snap)

    def __repr__(self) -> str:
        return f"VisualizationController({self.algorithm.key}, {self.state.value})"
