from __future__ import annotations
from dataclasses import dataclass
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

STATUS_OK = "OK"


class _AnkaModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class CommandResult(_AnkaModel):
    """Envelope printed by `anka --machine-readable`."""

    status: str
    body: Any = None
    exception_type: str | None = Field(
        None, validation_alias=AliasChoices("exceptionType", "exception_type")
    )
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK


# ===== Typed bodies =====
class CPUInfo(_AnkaModel):
    cores: int = Field(0, validation_alias=AliasChoices("cores", "Cores"))
    threads: int = Field(0, validation_alias=AliasChoices("threads", "Threads"))


class PortForwardingInfo(_AnkaModel):
    guest_port: int = Field(0, validation_alias=AliasChoices("guest_port", "GuestPort"))
    host_port: int = Field(0, validation_alias=AliasChoices("host_port", "HostPort"))
    rule_name: str = Field("", validation_alias=AliasChoices("name", "Name"))
    protocol: str = Field("tcp", validation_alias=AliasChoices("protocol", "Protocol"))


class DescribeResponse(_AnkaModel):
    name: str = Field("", validation_alias=AliasChoices("name", "Name"))
    uuid: str = Field("", validation_alias=AliasChoices("uuid", "UUID"))
    version: int = Field(0, validation_alias=AliasChoices("version", "Version"))
    cpu: CPUInfo = Field(
        default_factory=CPUInfo, validation_alias=AliasChoices("cpu", "CPU")
    )
    ram: str = Field("", validation_alias=AliasChoices("ram", "RAM"))
    port_forwarding: list[PortForwardingInfo] = Field(
        default_factory=list,
        validation_alias=AliasChoices("port_forwarding", "PortForwarding"),
    )


class ShowResponse(_AnkaModel):
    uuid: str = Field("", validation_alias=AliasChoices("uuid", "UUID"))
    name: str = Field("", validation_alias=AliasChoices("name", "Name"))
    status: str = Field("", validation_alias=AliasChoices("status", "Status"))
    cpu_cores: int = 0
    ram: str = ""
    hard_drive: str = ""


class RegistryListResponse(_AnkaModel):
    latest: str = ""
    id: str = ""
    name: str = ""


# ===== Request params =====
@dataclass
class CreateDiskParams:
    disk_size: str
    installer_app: str


@dataclass
class CreateParams:
    image_id: str
    ram_size: str
    cpu_count: int
    name: str


@dataclass
class CloneParams:
    vm_name: str
    source_uuid: str


@dataclass
class StartParams:
    vm_name: str
    update_addons: bool = False


@dataclass
class StopParams:
    vm_name: str
    force: bool = False


@dataclass
class SuspendParams:
    vm_name: str


@dataclass
class DeleteParams:
    vm_name: str
    force: bool = False


@dataclass
class RegistryParams:
    """Connection parameters shared by every registry call."""

    registry_name: str = ""
    registry_url: str = ""
    node_cert_path: str = ""
    node_key_path: str = ""
    ca_root_path: str = ""
    is_insecure: bool = False


@dataclass
class RegistryPushParams:
    vm_id: str
    tag: str = ""
    description: str = ""
    remote_vm: str = ""
    local: bool = False
