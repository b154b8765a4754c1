from __future__ import annotations

from enum import Enum

from anka_builder.state import ERROR, StateBag


class StepAction(str, Enum):
    CONTINUE = "continue"
    HALT = "halt"


class Step:
    """
    One piece of the VM lifecycle.

    `run` mutates remote state and returns a StepAction. `cleanup` undoes
    what this step did and must be safe to call whatever point `run`
    reached, including not at all.
    """

    @property
    def name(self) -> str:
        return type(self).__name__

    def run(self, state: StateBag) -> StepAction:
        raise NotImplementedError

    def cleanup(self, state: StateBag) -> None:
        return None

    @staticmethod
    def _halt(state: StateBag, err: Exception, context: str = "") -> StepAction:
        state.put(ERROR, err)
        state.ui.error(f"{context}: {err}" if context else str(err))
        return StepAction.HALT
