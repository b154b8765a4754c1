from __future__ import annotations

from anka_builder.errors import AnkaBuilderError, ConfigConflictError
from anka_builder.models import StopParams
from anka_builder.state import StateBag
from .base import Step, StepAction


class StepSetHyperThreading(Step):
    def run(self, state: StateBag) -> StepAction:
        config = state.config

        if not config.enable_htt and not config.disable_htt:
            return StepAction.CONTINUE

        # Also rejected by BuildConfig; a hand-built config can still get here.
        if config.enable_htt and config.disable_htt:
            return self._halt(
                state,
                ConfigConflictError(
                    "Conflicting setting enable_htt and disable_htt both true"
                ),
            )

        ui = state.ui
        client = state.client
        vm_name = state.vm_name

        try:
            descr = client.describe(vm_name)
            if config.disable_htt:
                if descr.cpu.threads == 0:
                    ui.say("Hyperthreading is already disabled")
                    return StepAction.CONTINUE
                flag = "--no-htt"
                ui.say(f"Disabling hyperthreading on {vm_name}")
            else:
                flag = "--htt"
                ui.say(f"Enabling hyperthreading on {vm_name}")

            client.show(vm_name)
            client.stop(StopParams(vm_name=vm_name, force=True))
            client.modify(vm_name, "set", "cpu", flag)
        except AnkaBuilderError as e:
            return self._halt(state, e)

        return StepAction.CONTINUE
