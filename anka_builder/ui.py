import sys
from typing import Protocol, TextIO


class Ui(Protocol):
    """Write-only narration sink for steps."""

    def say(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class ConsoleUi:
    def __init__(
        self,
        prefix: str = "anka",
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        self.prefix = prefix
        self.out = out or sys.stdout
        self.err = err or sys.stderr

    def say(self, message: str) -> None:
        print(f"==> {self.prefix}: {message}", file=self.out, flush=True)

    def error(self, message: str) -> None:
        print(f"==> {self.prefix}: {message}", file=self.err, flush=True)
