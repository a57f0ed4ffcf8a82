"""
recorder.py — Run Recorder & Analytics
========================================
Records a complete algorithm run (all Steps), then computes the
analytics metrics the UI needs for the Analytics panel.

Usage:
    rec = Recorder()
    metrics = rec.record("bubble_sort", {"array": "3, 1, 4"})
    rec.export()                     # serialisable snapshot for save/replay

The run goes through a real VisualizationController in MANUAL mode, so
the recorded outcome is exactly what a user stepping through the same
input would see.
"""

import sys
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Mapping, Optional

from algorithms.step import Step, StepKind
from config import Settings
from engine.controller import ControllerSnapshot, ControllerState, VisualizationController
from engine.scheduler import SchedulerMode


# ---------------------------------------------------------------------------
# Metrics dataclass: what the Analytics panel renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    algo_key:        str   = ""
    algo_label:      str   = ""
    outcome:         str   = ""         # final ControllerState value: done | error
    error:           str   = ""         # error message when outcome == error
    total_steps:     int   = 0          # number of Steps consumed
    comparisons:     int   = 0
    swaps:           int   = 0
    writes:          int   = 0          # array writes, table cells, bucket inserts, links
    visits:          int   = 0          # graph nodes expanded
    relaxations:     int   = 0          # edges examined
    probes:          int   = 0
    wall_time_ms:    float = 0.0        # wall-clock time to run to completion
    memory_bytes:    int   = 0          # approx size of the step buffer (sys.getsizeof)


_WRITE_KINDS = (StepKind.WRITE, StepKind.CELL, StepKind.INSERT, StepKind.LINK)


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        steps    : Full list of Steps from the run.
        metrics  : Computed RunMetrics (available after record()).
        final    : ControllerSnapshot at the end of the run.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings
        self.steps:   List[Step]                   = []
        self.metrics: Optional[RunMetrics]         = None
        self.final:   Optional[ControllerSnapshot] = None

        self._algo_key: str                = ""
        self._raw:      Dict[str, Any]     = {}

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------
    def record(self, algo_key: str, raw: Mapping[str, Any]) -> RunMetrics:
        """Validate, run to completion, compute metrics.  Raises UnknownAlgorithm."""
        controller = VisualizationController(
            algo_key,
            mode=SchedulerMode.MANUAL,
            settings=self.settings,
            on_step=self.record_step,
        )
        self._algo_key = algo_key
        self._raw      = dict(raw or {})
        self.steps     = []

        start = time.monotonic()
        controller.submit(raw)
        if controller.state == ControllerState.RUNNING:
            controller.run_to_end()
        wall_ms = (time.monotonic() - start) * 1000

        self.final   = controller.current_state()
        self.metrics = self._compute_metrics(controller, wall_ms)
        return self.metrics

    def record_step(self, step: Step) -> None:
        self.steps.append(step)

    def get_metrics(self) -> Optional[RunMetrics]:
        return self.metrics

    # ------------------------------------------------------------------
    # Export (serialisable snapshot)
    # ------------------------------------------------------------------
    def export(self) -> Dict[str, Any]:
        return {
            "algo_key": self._algo_key,
            "input":    {k: v for k, v in self._raw.items()},
            "metrics":  asdict(self.metrics) if self.metrics else {},
            "final":    self.final.to_dict() if self.final else {},
            "steps":    [s.to_dict() for s in self.steps],
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _compute_metrics(self, controller: VisualizationController, wall_ms: float) -> RunMetrics:
        counts = {kind: 0 for kind in StepKind}
        for s in self.steps:
            counts[s.kind] += 1

        # approximate memory: sizeof the steps buffer
        mem = sys.getsizeof(self.steps)
        for s in self.steps:
            mem += sys.getsizeof(s)

        error = self.final.error.message if self.final and self.final.error else ""
        return RunMetrics(
            algo_key=controller.algorithm.key,
            algo_label=controller.algorithm.label,
            outcome=controller.state.value,
            error=error,
            total_steps=len(self.steps),
            comparisons=counts[StepKind.COMPARE],
            swaps=counts[StepKind.SWAP],
            writes=sum(counts[k] for k in _WRITE_KINDS),
            visits=counts[StepKind.VISIT],
            relaxations=counts[StepKind.RELAX],
            probes=counts[StepKind.PROBE],
            wall_time_ms=round(wall_ms, 2),
            memory_bytes=mem,
        )
