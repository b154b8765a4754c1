"""Public API re-exports."""

from .anka_client import AnkaClient
from .builder import Artifact, Builder
from .models import BuildConfig
from .runner import BasicRunner, RunPhase
from .state import StateBag
from .steps import Step, StepAction

__all__ = [
    "AnkaClient",
    "Artifact",
    "Builder",
    "BuildConfig",
    "BasicRunner",
    "RunPhase",
    "StateBag",
    "Step",
    "StepAction",
]
