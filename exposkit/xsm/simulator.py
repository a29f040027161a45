"""Command line options of the XSM simulator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from exposkit.xfs.vdisk import word_value

DEFAULT_DEBUG = False
DEFAULT_CONSOLE = 20
DEFAULT_TIMER = 20
DEFAULT_DISK = 20

_MAX_DURATION = 1024
_LOWER_BOUNDS = {"--timer": 0, "--console": 20, "--disk": 20}


@dataclass
class Options:
    """Simulator settings: durations are counted in instructions."""

    timer: int = DEFAULT_TIMER
    debug: bool = DEFAULT_DEBUG
    disk: int = DEFAULT_DISK
    console: int = DEFAULT_CONSOLE


class OptionError(Exception):
    """Invalid command line options; ``status`` is the exit status to use."""

    def __init__(self, message: str, status: int = 1) -> None:
        super().__init__(message)
        self.status = status


def parse_args(argv: Sequence[str]) -> Options:
    """Parse simulator arguments (without the program name)."""
    options = Options()
    args = iter(argv)
    for arg in args:
        if arg == "--debug":
            options.debug = True
            continue
        low = _LOWER_BOUNDS.get(arg)
        if low is None:
            raise OptionError(f"Unrecognised option {arg}")
        text = next(args, None)
        if text is None:
            raise OptionError(f"{arg} requires a value")
        value = word_value(text)
        if not low <= value <= _MAX_DURATION:
            raise OptionError(f"{arg} takes value in the range {low}-{_MAX_DURATION}", status=0)
        # A timer of 0 turns the timer off; otherwise the count includes the firing step.
        duration = 0 if arg == "--timer" and value == 0 else value + 1
        setattr(options, arg[2:], duration)
    return options