from __future__ import annotations

import logging
from enum import Enum
from typing import Sequence

from anka_builder.errors import CleanupError
from anka_builder.state import ERROR, HALTED, UI, StateBag
from anka_builder.steps.base import Step, StepAction

logger = logging.getLogger(__name__)


class RunPhase(str, Enum):
    pending = "pending"
    running = "running"
    halted = "halted"
    cancelled = "cancelled"
    completed = "completed"


class BasicRunner:
    """
    Runs steps in order, then cleans up every step that was started,
    last one first. Cleanup always happens, whatever the outcome.
    """

    def __init__(self, steps: Sequence[Step]) -> None:
        self.steps: list[Step] = list(steps)
        self.phase: RunPhase = RunPhase.pending
        self.index: int = 0
        self.cleanup_errors: list[CleanupError] = []

    def run(self, state: StateBag) -> None:
        started: list[Step] = []
        try:
            for i, step in enumerate(self.steps):
                self.index = i
                if state.cancelled:
                    self.phase = RunPhase.cancelled
                    break

                self.phase = RunPhase.running
                started.append(step)
                action = self._run_step(step, state)

                if action == StepAction.HALT:
                    state.put(HALTED, True)
                    self.phase = RunPhase.halted
                    break
                if state.cancelled:
                    self.phase = RunPhase.cancelled
                    break
        finally:
            self._cleanup(started, state)
        self.phase = RunPhase.completed

    @staticmethod
    def _run_step(step: Step, state: StateBag) -> StepAction:
        logger.debug("Running step %s", step.name)
        try:
            return step.run(state)
        except KeyboardInterrupt:
            state.cancel()
            return StepAction.CONTINUE
        except Exception as e:  # pylint: disable=broad-except
            logger.exception("Step %s raised", step.name)
            state.put(ERROR, e)
            ui, ok = state.get_ok(UI)
            if ok:
                ui.error(str(e))
            return StepAction.HALT

    def _cleanup(self, started: list[Step], state: StateBag) -> None:
        for step in reversed(started):
            logger.debug("Cleaning up step %s", step.name)
            try:
                step.cleanup(state)
            except Exception as e:  # pylint: disable=broad-except
                err = CleanupError(step.name, e)
                self.cleanup_errors.append(err)
                logger.error("%s", err)
                ui, ok = state.get_ok(UI)
                if ok:
                    ui.error(str(err))
