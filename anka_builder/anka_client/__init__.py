"""Public API re-exports."""

from .proc import run_captured
from .output import parse_output
from .client import AnkaClient

__all__ = [
    "run_captured",
    "parse_output",
    "AnkaClient",
]
