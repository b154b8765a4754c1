# conftest.py
import pathlib
import random
import sys
from typing import Any, Callable, Sequence

import pytest

# ----------------------
# Path setup: make the repository root importable so `import anka_builder`
# works without installing the project.
# ----------------------
_THIS_DIR = pathlib.Path(__file__).resolve().parent
_REPO_ROOT = _THIS_DIR.parent.parent
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from anka_builder.anka_client import AnkaClient  # noqa: E402
from anka_builder.models import BuildConfig, CommandResult  # noqa: E402
from anka_builder.naming import NameGenerator  # noqa: E402
from anka_builder.state import CLIENT, CONFIG, UI, VM_NAME, StateBag  # noqa: E402


# ----------------------
# Test Utilities / Fakes
# ----------------------
def ok(body: Any = None) -> CommandResult:
    return CommandResult(status="OK", body=body)


def failed(message: str, exception_type: str = "AnkaError") -> CommandResult:
    return CommandResult(status="ERROR", message=message, exception_type=exception_type)


class FakeAnkaClient(AnkaClient):
    """
    Replaces the subprocess with canned results keyed by the command line,
    e.g. "modify foo set cpu --htt". Every command is recorded in order.
    """

    def __init__(
        self,
        results: dict[str, CommandResult] | None = None,
        errors: dict[str, Exception] | None = None,
    ):
        super().__init__(binary="anka", session=FakeSession(), timeout=5)
        self.results: dict[str, CommandResult] = results or {}
        self.errors: dict[str, Exception] = errors or {}
        self.commands: list[str] = []

    def invoke(self, command: str, args: Sequence[str] = ()) -> CommandResult:
        key = " ".join([command, *args])
        self.commands.append(key)
        if key in self.errors:
            raise self.errors[key]
        if key not in self.results:
            raise AssertionError(f"unexpected anka command: {key}")
        return self.results[key]


class RecordingUi:
    def __init__(self):
        self.said: list[str] = []
        self.errors: list[str] = []

    def say(self, message: str) -> None:
        self.said.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


class FakeResponse:
    def __init__(self, *, status_code=200, content=b"", text=""):
        self.status_code = status_code
        self.content = content
        self.text = text or content.decode(errors="ignore")


class FakeSession:
    def __init__(self):
        self.calls: list[dict[str, Any]] = []
        self.queue: list[FakeResponse] = []
        self.raises: Exception | None = None

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if self.raises is not None:
            raise self.raises
        if self.queue:
            return self.queue.pop(0)
        return FakeResponse(content=b'{"status": "OK"}')


# ----------------------
# Shared Fixtures
# ----------------------
@pytest.fixture
def ui() -> RecordingUi:
    return RecordingUi()


@pytest.fixture
def names() -> NameGenerator:
    return NameGenerator(random.Random(1234))


@pytest.fixture
def make_state(ui) -> Callable[..., StateBag]:
    """
    Build a StateBag the way the builder would: config, client and ui first,
    vm_name only when a previous step would have written it.
    """

    def _make(
        config: BuildConfig | None = None,
        client: AnkaClient | None = None,
        vm_name: str | None = None,
    ) -> StateBag:
        state = StateBag(
            {
                CONFIG: config or BuildConfig(source_vm_name="source"),
                CLIENT: client or FakeAnkaClient(),
                UI: ui,
            }
        )
        if vm_name is not None:
            state.put(VM_NAME, vm_name)
        return state

    return _make
