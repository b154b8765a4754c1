from __future__ import annotations
import re
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from anka_builder import settings
from anka_builder.errors import ConfigValidationError
from anka_builder.naming import NameGenerator
from .client import RegistryParams

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ns|us|µs|ms|s|m|h)")
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_RULE_NAME_KEYS = ("port_forwarding_rule_name", "rule_name")


def parse_duration(value: str) -> float:
    """
    Parse a duration string such as "10s", "1m30s" or "500ms" into seconds.
    A bare "0" is accepted.
    """
    text = value.strip()
    if text == "0":
        return 0.0
    pos = 0
    total = 0.0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    if pos == 0 or pos != len(text):
        raise ValueError(f"invalid duration {value!r}")
    return total


class PortForwardingRule(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    guest_port: int = Field(
        0,
        validation_alias=AliasChoices("port_forwarding_guest_port", "guest_port"),
    )
    host_port: int = Field(
        0,
        validation_alias=AliasChoices("port_forwarding_host_port", "host_port"),
    )
    rule_name: str = Field(
        "",
        validation_alias=AliasChoices(*_RULE_NAME_KEYS),
    )


class BuildConfig(BaseModel):
    """
    Validated build template. Immutable once `from_template` returns it.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    anka_user: str = ""
    anka_password: str = ""

    installer_app: str = ""
    source_vm_name: str = ""
    source_vm_tag: str = ""

    vm_name: str = ""
    disk_size: str = settings.DEFAULT_DISK_SIZE
    ram_size: str = settings.DEFAULT_RAM_SIZE
    cpu_count: str = settings.DEFAULT_CPU_COUNT

    always_fetch: bool = False
    update_addons: bool = False

    registry_name: str = ""
    registry_path: str = ""
    cert: str = ""
    key: str = ""
    cacert: str = ""
    insecure: bool = False

    port_forwarding_rules: list[PortForwardingRule] = Field(default_factory=list)

    hw_uuid: str = ""
    boot_delay: str = settings.DEFAULT_BOOT_DELAY
    enable_htt: bool = False
    disable_htt: bool = False
    use_anka_cp: bool = False

    stop_vm: bool = False

    @field_validator("cpu_count", mode="before")
    @classmethod
    def _cpu_count_as_str(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("boot_delay", mode="before")
    @classmethod
    def _boot_delay_default(cls, v: Any) -> Any:
        if v is None or v == "":
            return settings.DEFAULT_BOOT_DELAY
        return v

    # ---- Derived values ----
    @property
    def boot_delay_seconds(self) -> float:
        return parse_duration(self.boot_delay)

    @property
    def cpu_count_int(self) -> int:
        return int(self.cpu_count)

    @property
    def registry_params(self) -> RegistryParams:
        return RegistryParams(
            registry_name=self.registry_name,
            registry_url=self.registry_path,
            node_cert_path=self.cert,
            node_key_path=self.key,
            ca_root_path=self.cacert,
            is_insecure=self.insecure,
        )

    # ---- Validation ----
    def problems(self) -> list[str]:
        errs: list[str] = []

        if not self.installer_app and not self.source_vm_name:
            errs.append("installer_app or source_vm_name must be specified")

        if self.installer_app and self.source_vm_name:
            errs.append("cannot specify both an installer_app and source_vm_name")

        if self.source_vm_name and re.search(r"[ \n]", self.source_vm_name):
            errs.append("source_vm_name name contains spaces")

        if self.enable_htt and self.disable_htt:
            errs.append("cannot specify both enable_htt and disable_htt")

        try:
            _ = self.cpu_count_int
        except ValueError:
            errs.append(f"cpu_count must be an integer, got {self.cpu_count!r}")

        try:
            _ = self.boot_delay_seconds
        except ValueError as e:
            errs.append(f"boot_delay: {e}")

        for rule in self.port_forwarding_rules:
            if rule.guest_port == 0:
                errs.append("guest port is required")

        return errs

    @classmethod
    def from_template(
        cls,
        raw: dict[str, Any],
        names: NameGenerator | None = None,
    ) -> "BuildConfig":
        """
        Decode and validate a raw template mapping.
        Port-forwarding rules with a blank name get a random one.
        Raises ConfigValidationError listing every problem found.
        """
        names = names or NameGenerator()
        data = dict(raw)

        rules: list[dict[str, Any]] = []
        for rule in data.get("port_forwarding_rules") or []:
            rule = dict(rule)
            if not any(rule.get(k) for k in _RULE_NAME_KEYS):
                for k in _RULE_NAME_KEYS:
                    rule.pop(k, None)
                rule["port_forwarding_rule_name"] = names.random_sequence()
            rules.append(rule)
        data["port_forwarding_rules"] = rules

        try:
            config = cls.model_validate(data)
        except ValidationError as e:
            raise ConfigValidationError(
                [
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                    for err in e.errors()
                ]
            ) from e

        errs = config.problems()
        if errs:
            raise ConfigValidationError(errs)
        return config
