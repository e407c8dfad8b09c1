# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Error types raised by provisioning operations.

Nothing in the library recovers from these locally.  They propagate up to
``phpbuild.cli.main.main`` which prints the message (and the optional hint)
and exits with status 1.
"""

import difflib
import shlex
from collections.abc import Iterable, Sequence
from pathlib import Path


class ProvisionError(Exception):
    """Base class for every failure that aborts a provisioning run."""

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class UnknownCommandError(ProvisionError):
    def __init__(self, name: str, known: Iterable[str] = ()) -> None:
        self.name = name
        self.known = tuple(sorted(known))
        hint = "Run 'phpbuild list' to see the available commands."
        close = difflib.get_close_matches(name.replace("-", "_"), self.known, n=1)
        if close:
            hint = f"Did you mean '{close[0]}'? {hint}"
        super().__init__(f"Unknown command: {name}", hint=hint)


class UsageError(ProvisionError):
    """An operation was called with missing or surplus arguments."""


class InvalidTargetError(ProvisionError):
    def __init__(self, target: str | None, valid: Sequence[str]) -> None:
        self.target = target
        choices = ", ".join(valid)
        if target is None:
            message = f"configure_php: missing target (expected one of: {choices})"
        else:
            message = f"configure_php: invalid target {target!r} (expected one of: {choices})"
        super().__init__(message)


class CommandFailedError(ProvisionError):
    """An external command could not be run or exited non-zero."""

    def __init__(
        self,
        argv: Sequence[str],
        returncode: int | None = None,
        reason: str | None = None,
    ) -> None:
        self.argv = list(argv)
        self.returncode = returncode
        cmd = shlex.join(self.argv)
        if reason:
            message = f"{cmd}: {reason}"
        else:
            message = f"{cmd} exited with status {returncode}"
        super().__init__(message)


class EmptyHostKeyError(ProvisionError):
    def __init__(self, host: str) -> None:
        self.host = host
        super().__init__(
            f"ssh-keyscan returned no host key for {host}",
            hint="Check network access from the build container to the host.",
        )


class FileOperationError(ProvisionError):
    """A local file mutation (write, remove, chown) failed."""

    def __init__(self, action: str, path: Path, error: BaseException) -> None:
        self.path = path
        super().__init__(f"Failed to {action} {path}: {error}")


class ConfigError(ProvisionError):
    """The YAML configuration file is unreadable or has the wrong shape."""
