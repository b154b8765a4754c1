from __future__ import annotations

from anka_builder.errors import AnkaBuilderError
from anka_builder.models import StopParams
from anka_builder.state import StateBag
from .base import Step, StepAction


class StepStopVM(Step):
    def run(self, state: StateBag) -> StepAction:
        if not state.config.stop_vm:
            return StepAction.CONTINUE

        vm_name = state.vm_name
        state.ui.say(f"Stopping VM {vm_name}")
        try:
            state.client.stop(StopParams(vm_name=vm_name))
        except AnkaBuilderError as e:
            return self._halt(state, e)
        return StepAction.CONTINUE
