from __future__ import annotations

import logging

from anka_builder import settings
from anka_builder.anka_client import AnkaClient
from anka_builder.errors import AnkaBuilderError
from anka_builder.models import (
    CloneParams,
    CreateDiskParams,
    CreateParams,
    DeleteParams,
    SuspendParams,
)
from anka_builder.naming import NameGenerator
from anka_builder.state import VM_NAME, StateBag
from .base import Step, StepAction

logger = logging.getLogger(__name__)


class StepCreateVM(Step):
    """
    Clones the build VM from `source_vm_name`, or from a base VM built out of
    `installer_app` when no source is given.
    """

    def __init__(self, names: NameGenerator | None = None) -> None:
        self.names: NameGenerator = names or NameGenerator()
        self.vm_name: str | None = None
        self._client: AnkaClient | None = None

    def run(self, state: StateBag) -> StepAction:
        config = state.config
        ui = state.ui
        client = state.client
        self._client = client

        source_vm = config.source_vm_name

        if not source_vm:
            ui.say("Creating a new disk from installer, this will take a while")
            try:
                image_id = client.create_disk(
                    CreateDiskParams(
                        disk_size=config.disk_size,
                        installer_app=config.installer_app,
                    )
                )
            except AnkaBuilderError as e:
                return self._halt(state, e)

            try:
                cpu_count = config.cpu_count_int
            except ValueError as e:
                return self._halt(state, e)

            source_vm = self.names.vm_name(settings.BASE_VM_PREFIX)

            ui.say("Creating a new virtual machine for disk")
            try:
                client.create(
                    CreateParams(
                        image_id=image_id,
                        ram_size=config.ram_size,
                        cpu_count=cpu_count,
                        name=source_vm,
                    )
                )
            except AnkaBuilderError as e:
                return self._halt(state, e, context="Error creating VM")

            ui.say(f"VM {source_vm} was created")

        try:
            descr = client.describe(source_vm)
        except AnkaBuilderError as e:
            return self._halt(state, e)

        vm_name = config.vm_name or self.names.vm_name(settings.BUILD_VM_PREFIX)

        ui.say(f"Cloning source VM {source_vm} into a new virtual machine {vm_name}")
        # Recorded before cloning: a failed clone can still leave a VM behind.
        self.vm_name = vm_name
        try:
            client.clone(CloneParams(vm_name=vm_name, source_uuid=descr.uuid))
        except AnkaBuilderError as e:
            return self._halt(state, e)

        state.put(VM_NAME, vm_name)
        return StepAction.CONTINUE

    def cleanup(self, state: StateBag) -> None:
        if not self.vm_name or self._client is None:
            return

        vm_name = self.vm_name
        if state.cancelled:
            logger.info("Build cancelled, deleting VM %s", vm_name)
            self._client.delete(DeleteParams(vm_name=vm_name, force=True))
            self.vm_name = None
            return

        # StepStopVM already stopped it on a clean run.
        if state.config.stop_vm and not state.halted:
            return

        logger.info("Suspending VM %s", vm_name)
        self._client.suspend(SuspendParams(vm_name=vm_name))
        self.vm_name = None
