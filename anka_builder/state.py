"""
Shared state for a single build run.

Keys and the step that writes them, in write-before-read order:

    config     Builder, before the first step      BuildConfig
    client     Builder, before the first step      AnkaClient
    ui         Builder, before the first step      Ui
    vm_name    StepCreateVM                        str
    error      the step that failed                Exception
    halted     BasicRunner, when a step halts      bool
    cancelled  StateBag.cancel()                   bool

`vm_name` is written once. Every later step and every cleanup reads that
same value to know which VM this run owns.
"""

from __future__ import annotations

import threading
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from anka_builder.anka_client import AnkaClient
    from anka_builder.models import BuildConfig
    from anka_builder.ui import Ui

CONFIG = "config"
CLIENT = "client"
UI = "ui"
VM_NAME = "vm_name"
ERROR = "error"
HALTED = "halted"
CANCELLED = "cancelled"

INITIAL_KEYS = (CONFIG, CLIENT, UI)


class StateBag:
    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})
        self._cancel = threading.Event()

    # ---- Mapping ----
    def get(self, key: str) -> Any:
        """Missing keys raise KeyError: it means the steps ran out of order."""
        return self._data[key]

    def get_ok(self, key: str) -> tuple[Any, bool]:
        if key in self._data:
            return self._data[key], True
        return None, False

    def put(self, key: str, value: Any) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def keys(self) -> list[str]:
        return list(self._data)

    # ---- Typed accessors ----
    @property
    def config(self) -> "BuildConfig":
        return self.get(CONFIG)

    @property
    def client(self) -> "AnkaClient":
        return self.get(CLIENT)

    @property
    def ui(self) -> "Ui":
        return self.get(UI)

    @property
    def vm_name(self) -> str:
        return self.get(VM_NAME)

    # ---- Cancellation ----
    def cancel(self) -> None:
        """Safe to call from a signal handler or another thread."""
        self._data[CANCELLED] = True
        self._cancel.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def wait_cancelled(self, timeout: float) -> bool:
        """Sleep up to `timeout` seconds, returning early (True) on cancel."""
        return self._cancel.wait(timeout)

    @property
    def halted(self) -> bool:
        return bool(self._data.get(HALTED))

    def __repr__(self) -> str:
        return f"StateBag(keys={sorted(self._data)}, cancelled={self.cancelled})"
