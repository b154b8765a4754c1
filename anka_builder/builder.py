from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from anka_builder.anka_client import AnkaClient
from anka_builder.errors import AnkaBuilderError, BuildCancelledError
from anka_builder.models import BuildConfig
from anka_builder.naming import NameGenerator
from anka_builder.runner import BasicRunner
from anka_builder.state import CLIENT, CONFIG, ERROR, UI, StateBag
from anka_builder.steps import (
    Step,
    StepCreateVM,
    StepForwardPorts,
    StepSetHyperThreading,
    StepStartVM,
    StepStopVM,
)
from anka_builder.ui import ConsoleUi, Ui

logger = logging.getLogger(__name__)

BUILDER_ID = "packer.anka"


@dataclass
class Artifact:
    vm_name: str
    builder_id: str = BUILDER_ID

    def __str__(self) -> str:
        return f"Anka VM {self.vm_name}"


class Builder:
    """
    Prepares a BuildConfig, runs the fixed step sequence against it and
    returns the resulting VM as an Artifact.
    """

    def __init__(
        self,
        client: AnkaClient | None = None,
        ui: Ui | None = None,
        names: NameGenerator | None = None,
    ) -> None:
        self.client: AnkaClient = client or AnkaClient()
        self.ui: Ui = ui or ConsoleUi()
        self.names: NameGenerator = names or NameGenerator()
        self.config: BuildConfig | None = None
        self.state: StateBag = StateBag()
        self.runner: BasicRunner | None = None

    def prepare(self, raw: dict[str, Any]) -> BuildConfig:
        self.config = BuildConfig.from_template(raw, self.names)
        return self.config

    def new_state(self) -> StateBag:
        """A fresh bag for each run."""
        return StateBag()

    def steps(self) -> list[Step]:
        return [
            StepCreateVM(self.names),
            StepSetHyperThreading(),
            StepForwardPorts(),
            StepStartVM(),
            StepStopVM(),
        ]

    def run(self) -> Artifact:
        if self.config is None:
            raise RuntimeError("prepare() must be called before run()")

        self.state = self.new_state()
        self.state.put(CONFIG, self.config)
        self.state.put(CLIENT, self.client)
        self.state.put(UI, self.ui)

        self.runner = BasicRunner(self.steps())
        self.runner.run(self.state)

        if self.state.cancelled:
            self.ui.error("Build was cancelled")
            raise BuildCancelledError()

        err, failed = self.state.get_ok(ERROR)
        if failed:
            raise err
        if self.state.halted:
            raise AnkaBuilderError("build halted")

        artifact = Artifact(vm_name=self.state.vm_name)
        logger.info("Build finished: %s", artifact)
        return artifact

    def cancel(self) -> None:
        self.state.cancel()
