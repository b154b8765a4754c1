from __future__ import annotations


class AnkaBuilderError(Exception):
    """Base class for every error raised by the builder."""


class ConfigConflictError(AnkaBuilderError):
    """Two mutually exclusive options were both set."""


class ConfigValidationError(AnkaBuilderError):
    """Aggregates every problem found while validating a template."""

    def __init__(self, errors: list[str]) -> None:
        self.errors: list[str] = list(errors)
        super().__init__("; ".join(self.errors))


class ProcessLaunchError(AnkaBuilderError):
    """The anka executable could not be started."""


class MalformedOutputError(AnkaBuilderError):
    """The anka executable printed something that is not a result envelope."""

    def __init__(self, message: str, raw: str | bytes = "") -> None:
        self.raw = raw
        super().__init__(message)


class ToolDomainError(AnkaBuilderError):
    """anka answered, but with a non-OK status."""

    def __init__(self, message: str, exception_type: str | None = None) -> None:
        self.exception_type = exception_type
        super().__init__(message)


class UnsupportedResponseError(AnkaBuilderError):
    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"unsupported http response code: {status_code}")


class RegistryTransportError(AnkaBuilderError):
    """The registry could not be reached: connection, TLS or timeout failure."""


class CleanupError(AnkaBuilderError):
    """A compensating action failed. Logged, never raised out of a run."""

    def __init__(self, step_name: str, cause: BaseException) -> None:
        self.step_name = step_name
        self.cause = cause
        super().__init__(f"cleanup of {step_name} failed: {cause}")


class BuildCancelledError(AnkaBuilderError):
    def __init__(self) -> None:
        super().__init__("Build was cancelled")
