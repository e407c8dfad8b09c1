"""ANSI color helpers for CLI diagnostics."""

import os
import sys
from typing import TextIO


def supports_color(stream: TextIO | None = None) -> bool:
    """Check if *stream* (stdout by default) should receive colored output.

    NO_COLOR always wins. FORCE_COLOR (when set and not ``"0"``) forces color
    on even inside a non-interactive ``docker build``. Otherwise falls back
    to ``isatty()``.
    """
    if "NO_COLOR" in os.environ:
        return False
    force = os.environ.get("FORCE_COLOR")
    if force is not None and force != "0":
        return True
    stream = stream if stream is not None else sys.stdout
    try:
        return stream.isatty()
    except (AttributeError, ValueError):
        return False


def color(text: str, code: str, enabled: bool) -> str:
    if not enabled:
        return text
    return f"\x1b[{code}m{text}\x1b[0m"


def red(text: str, enabled: bool) -> str:
    return color(text, "1;31", enabled)


def yellow(text: str, enabled: bool) -> str:
    return color(text, "33", enabled)


def gray(text: str, enabled: bool) -> str:
    return color(text, "90", enabled)


def yes_no(value: bool, enabled: bool) -> str:
    """Return green ``"yes"`` or red ``"no"`` based on *value* when *enabled*."""
    return color("yes" if value else "no", "32" if value else "31", enabled)
