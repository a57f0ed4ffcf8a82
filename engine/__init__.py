"""
engine/
-------
State fold, playback scheduling, the controller FSM and run recording.

    from engine import VisualizationController, ControllerState, Recorder
"""

from engine.state      import VisualizationState
from engine.scheduler  import (
    AnimationScheduler,
    SchedulerMisuse,
    SchedulerMode,
    SchedulerState,
    SPEED_PRESETS,
)
from engine.controller import (
    ALGORITHM_FAILURE,
    INPUT_ERROR,
    ControllerSnapshot,
    ControllerState,
    ErrorReport,
    UnknownAlgorithm,
    VisualizationController,
)
from engine.recorder   import Recorder, RunMetrics

__all__ = [
    "VisualizationState",
    "AnimationScheduler",
    "SchedulerMisuse",
    "SchedulerMode",
    "SchedulerState",
    "SPEED_PRESETS",
    "ALGORITHM_FAILURE",
    "INPUT_ERROR",
    "ControllerSnapshot",
    "ControllerState",
    "ErrorReport",
    "UnknownAlgorithm",
    "VisualizationController",
    "Recorder",
    "RunMetrics",
]
