from __future__ import annotations

import logging
from typing import Sequence

import requests

from anka_builder import settings
from anka_builder.errors import MalformedOutputError, ToolDomainError
from anka_builder.models import (
    CommandResult,
    CloneParams,
    CreateDiskParams,
    CreateParams,
    DeleteParams,
    DescribeResponse,
    ShowResponse,
    StartParams,
    StopParams,
    SuspendParams,
)
from .output import parse_body, parse_output
from .proc import run_captured
from .registry import RegistryMixin

logger = logging.getLogger(__name__)


class AnkaClient(RegistryMixin):
    """
    Client for the anka CLI in machine-readable mode.

    `invoke` is the only place a process is started; every other method
    builds an argv, calls it and unwraps the body.
    """

    def __init__(
        self,
        binary: str | None = None,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        self.binary: str = binary or settings.ANKA_BIN
        self.session: requests.Session = session or requests.Session()
        self.timeout: float = (
            timeout if timeout is not None else settings.ANKA_REGISTRY_TIMEOUT_S
        )

    def invoke(self, command: str, args: Sequence[str] = ()) -> CommandResult:
        """
        Run `anka --machine-readable <command> <args...>` and parse its output.
        A non-OK status is returned, not raised.
        """
        argv = [self.binary, "--machine-readable", command, *args]
        logger.debug("Executing anka command: %s", " ".join(argv))
        raw = run_captured(argv)
        logger.debug("anka output: %s", raw.decode(errors="ignore").strip())
        return parse_output(raw)

    def _run(self, command: str, args: Sequence[str] = ()) -> CommandResult:
        output = self.invoke(command, args)
        if not output.ok:
            logger.error(
                "Error executing %s command: %s %s",
                command,
                output.exception_type,
                output.message,
            )
            raise ToolDomainError(
                output.message or f"anka {command} failed ({output.status})",
                output.exception_type,
            )
        return output

    # ---- Lifecycle ----
    def create_disk(self, params: CreateDiskParams) -> str:
        """Builds a disk image from an installer app. Returns the image id."""
        output = self._run(
            "create-disk",
            ["--disk-size", params.disk_size, "--app", params.installer_app],
        )
        body = output.body
        if isinstance(body, dict):
            body = body.get("image_id") or body.get("id")
        if not isinstance(body, str) or not body:
            raise MalformedOutputError(
                "create-disk did not return an image id", str(output.body)
            )
        return body

    def create(self, params: CreateParams) -> str:
        """Wraps an image in a new VM. Returns the VM uuid."""
        output = self._run(
            "create",
            [
                "--image-id",
                params.image_id,
                "--ram-size",
                params.ram_size,
                "--cpu-count",
                str(params.cpu_count),
                params.name,
            ],
        )
        body = output.body
        uuid = body.get("uuid") if isinstance(body, dict) else None
        if not isinstance(uuid, str) or not uuid:
            raise MalformedOutputError("create did not return a VM uuid", str(body))
        return uuid

    def clone(self, params: CloneParams) -> None:
        self._run("clone", [params.source_uuid, params.vm_name])

    def describe(self, vm_name: str) -> DescribeResponse:
        output = self._run("describe", [vm_name])
        return parse_body("describe", DescribeResponse, output.body)

    def show(self, vm_name: str) -> ShowResponse:
        output = self._run("show", [vm_name])
        return parse_body("show", ShowResponse, output.body)

    def start(self, params: StartParams) -> None:
        args: list[str] = []
        if params.update_addons:
            args.append("--update-addons")
        self._run("start", [*args, params.vm_name])

    def stop(self, params: StopParams) -> None:
        args: list[str] = []
        if params.force:
            args.append("--force")
        self._run("stop", [*args, params.vm_name])

    def suspend(self, params: SuspendParams) -> None:
        self._run("suspend", [params.vm_name])

    def delete(self, params: DeleteParams) -> None:
        args: list[str] = []
        if params.force:
            args.append("--force")
        self._run("delete", [*args, params.vm_name])

    def modify(self, vm_name: str, command: str, prop: str, *flags: str) -> None:
        """modify <vm> <command> <property> <flags...>, e.g. `modify foo set cpu --htt`."""
        self._run("modify", [vm_name, command, prop, *flags])
