from .client import (
    STATUS_OK,
    CommandResult,
    CPUInfo,
    PortForwardingInfo,
    DescribeResponse,
    ShowResponse,
    RegistryListResponse,
    CreateDiskParams,
    CreateParams,
    CloneParams,
    StartParams,
    StopParams,
    SuspendParams,
    DeleteParams,
    RegistryParams,
    RegistryPushParams,
)

from .config import BuildConfig, PortForwardingRule, parse_duration


__all__ = [
    "STATUS_OK",
    "CommandResult",
    "CPUInfo",
    "PortForwardingInfo",
    "DescribeResponse",
    "ShowResponse",
    "RegistryListResponse",
    "CreateDiskParams",
    "CreateParams",
    "CloneParams",
    "StartParams",
    "StopParams",
    "SuspendParams",
    "DeleteParams",
    "RegistryParams",
    "RegistryPushParams",
    "BuildConfig",
    "PortForwardingRule",
    "parse_duration",
]
