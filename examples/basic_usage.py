#!/usr/bin/env python3
"""Programmatic event delivery example.

This demonstrates using the dispatcher components directly:

* load settings from `.env`
* deliver lifecycle events to a native handler
* extend the native handler with a script loaded from a file

The script path is passed as an argument (not read from `.env`).
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from event_dispatch import EventContext, LifecycleEvents, ScriptFile, Scriptable


class Spinner(LifecycleEvents, Scriptable):
    def __init__(self) -> None:
        self.angle = 0

    def on_early_init(self, context: EventContext) -> None:
        pass

    def on_init(self, context: EventContext) -> None:
        print("Spinner ready")

    def on_after_init(self) -> None:
        pass

    def on_step(self) -> None:
        self.angle = (self.angle + 15) % 360


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Deliver lifecycle events (programmatic example).")
    parser.add_argument("--script", type=Path, default=None, help="Python script with handlers")
    parser.add_argument("--frames", type=int, default=3, help="Number of on_step events to send")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    context = EventContext(configure_logging=True)
    spinner = Spinner()
    if args.script is not None:
        context.attach_script(spinner, ScriptFile.from_path(args.script))

    context.send_event(spinner, LifecycleEvents, "on_early_init", context)
    context.send_event(spinner, LifecycleEvents, "on_init", context)
    context.send_event(spinner, LifecycleEvents, "on_after_init")

    for _ in range(args.frames):
        result = context.send_event(spinner, LifecycleEvents, "on_step")
        handlers = ", ".join(kind.value for kind in result.handlers)
        print(f"angle={spinner.angle} handlers=[{handlers}]")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
