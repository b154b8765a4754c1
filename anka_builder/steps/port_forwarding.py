from __future__ import annotations

from anka_builder.errors import AnkaBuilderError
from anka_builder.state import StateBag
from .base import Step, StepAction


class StepForwardPorts(Step):
    def run(self, state: StateBag) -> StepAction:
        rules = state.config.port_forwarding_rules
        if not rules:
            return StepAction.CONTINUE

        ui = state.ui
        client = state.client
        vm_name = state.vm_name

        for rule in rules:
            ui.say(
                f"Ensuring {rule.rule_name} port-forwarding "
                f"(Guest Port: {rule.guest_port}, Host Port: {rule.host_port})"
            )
            try:
                client.modify(
                    vm_name,
                    "add",
                    "port-forwarding",
                    "--host-port",
                    str(rule.host_port),
                    "--guest-port",
                    str(rule.guest_port),
                    rule.rule_name,
                )
            except AnkaBuilderError as e:
                return self._halt(state, e)

        return StepAction.CONTINUE
