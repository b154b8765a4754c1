import logging
import subprocess
from typing import Iterable

from anka_builder.errors import ProcessLaunchError

logger = logging.getLogger(__name__)


def run_captured(cmd: Iterable[str]) -> bytes:
    """
    Run a command to completion and return its stdout.
    The exit code is not checked: anka reports failures inside the payload.
    """
    argv = list(cmd)
    try:
        completed = subprocess.run(
            argv,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            check=False,
        )
    except OSError as e:
        raise ProcessLaunchError(f"could not start {argv[0]}: {e}") from e

    if completed.stderr:
        logger.debug(
            "%s stderr: %s", argv[0], completed.stderr.decode(errors="ignore")
        )
    return completed.stdout
