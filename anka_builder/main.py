from __future__ import annotations

import json
import logging
import signal
import sys

from anka_builder import settings
from anka_builder.builder import Builder
from anka_builder.errors import AnkaBuilderError, ConfigValidationError
from anka_builder.ui import ConsoleUi


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 1:
        print("usage: python -m anka_builder.main <template.json>", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=settings.ANKA_LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    with open(argv[0], "r", encoding="utf-8") as fh:
        raw = json.load(fh)

    builder = Builder(ui=ConsoleUi())
    try:
        builder.prepare(raw)
    except ConfigValidationError as e:
        for msg in e.errors:
            print(f"* {msg}", file=sys.stderr)
        return 1

    signal.signal(signal.SIGINT, lambda *_: builder.cancel())

    try:
        artifact = builder.run()
    except AnkaBuilderError as e:
        print(f"Build failed: {e}", file=sys.stderr)
        return 1

    print(f"Build finished: {artifact}")
    return 0


# ===== Entrypoint =====
if __name__ == "__main__":
    sys.exit(main())
