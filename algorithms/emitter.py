"""
emitter.py — Restartable Step Sequences
========================================
A StepEmitter pairs an algorithm generator function with validated
params.  Iterating it always starts a FRESH generator, so two emitters
built from the same params — or two passes over one emitter — yield the
identical sequence.

Guarantees layered on top of the raw generator:
  • step numbers are consecutive from 0
  • nothing is yielded after a `done` / `failed` step
  • a generator that simply runs out is closed with a `done` step
  • an exception inside the algorithm becomes a terminal `failed` step;
    it is logged, never propagated to the scheduler
"""

import logging
from dataclasses import replace
from typing import Any, Callable, Iterator, List

from algorithms.step import Step, StepKind

logger = logging.getLogger(__name__)

AlgorithmFn = Callable[[Any], Iterator[Step]]


class StepEmitter:

    def __init__(self, fn: AlgorithmFn, params: Any, label: str = ""):
        self._fn     = fn
        self.params  = params
        self.label   = label or getattr(fn, "__name__", "algorithm")

    def __iter__(self) -> Iterator[Step]:
        return self._guarded(self._fn(self.params))

    def steps(self) -> List[Step]:
        """Materialise the whole sequence (tests, recorder)."""
        return list(self)

    def _guarded(self, gen: Iterator[Step]) -> Iterator[Step]:
        step_no = 0
        try:
            for step in gen:
                step = replace(step, step_number=step_no)
                step_no += 1
                yield step
                if step.is_terminal:
                    return
        except Exception as exc:
            logger.exception("%s crashed after %d steps", self.label, step_no)
            yield Step(
                kind=StepKind.FAILED,
                step_number=step_no,
                reason=f"internal error: {exc}",
                explanation=f"The {self.label} run stopped unexpectedly: {exc}",
            )
            return
        finally:
            close = getattr(gen, "close", None)
            if close is not None:
                close()

        yield Step(
            kind=StepKind.DONE,
            step_number=step_no,
            explanation=f"{self.label} finished.",
        )

    def __repr__(self) -> str:
        return f"StepEmitter({self.label}, params={self.params!r})"
