from __future__ import annotations

from anka_builder.errors import AnkaBuilderError
from anka_builder.models import StartParams
from anka_builder.state import StateBag
from .base import Step, StepAction


class StepStartVM(Step):
    """Starts the build VM and gives it `boot_delay` to come up."""

    def run(self, state: StateBag) -> StepAction:
        config = state.config
        ui = state.ui
        vm_name = state.vm_name

        ui.say(f"Starting VM {vm_name}")
        try:
            state.client.start(
                StartParams(vm_name=vm_name, update_addons=config.update_addons)
            )
        except AnkaBuilderError as e:
            return self._halt(state, e)

        delay = config.boot_delay_seconds
        if delay > 0:
            ui.say(f"Waiting {config.boot_delay} for the VM to boot")
            if state.wait_cancelled(delay):
                ui.say("Boot wait interrupted")

        return StepAction.CONTINUE
