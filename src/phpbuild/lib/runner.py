# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Fail-fast execution of external commands and local file mutations.

Every side effect of an operation goes through a :class:`Runner` so that a
``--dry-run`` invocation can print the exact sequence of steps without
touching the system.
"""

import os
import shlex
import subprocess
import sys
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import TextIO

from ._util.fs import chown_tree, clear_dir, ensure_dir, remove_tree
from ._util.logging_utils import _log_debug
from .errors import CommandFailedError, FileOperationError


class Runner:
    def __init__(self, dry_run: bool = False, out: TextIO | None = None) -> None:
        self.dry_run = dry_run
        self._out = out

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    # ---------- Output ----------

    def step(self, message: str) -> None:
        """Announce a high-level provisioning step."""
        print(f"==> {message}", file=self.out, flush=True)
        _log_debug(f"step: {message}")

    def _echo(self, line: str) -> None:
        prefix = "[dry-run] " if self.dry_run else ""
        print(f"{prefix}$ {line}", file=self.out, flush=True)
        _log_debug(f"{'dry-run ' if self.dry_run else ''}exec: {line}")

    # ---------- External commands ----------

    def run(
        self,
        argv: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        input: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Run *argv*, raising CommandFailedError on any failure."""
        argv = [str(a) for a in argv]
        self._echo(shlex.join(argv) if cwd is None else f"(cd {cwd} && {shlex.join(argv)})")
        if self.dry_run:
            return
        self._execute(argv, cwd=cwd, env=env, input=input, timeout=timeout, capture=False)

    def capture(self, argv: Sequence[str], *, timeout: float | None = None) -> str:
        """Run *argv* and return its stdout.  Returns ``""`` in dry-run mode."""
        argv = [str(a) for a in argv]
        self._echo(shlex.join(argv))
        if self.dry_run:
            return ""
        result = self._execute(argv, timeout=timeout, capture=True)
        return result.stdout or ""

    def _execute(
        self,
        argv: list[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        input: str | None = None,
        timeout: float | None = None,
        capture: bool,
    ) -> subprocess.CompletedProcess:
        full_env = None
        if env:
            full_env = dict(os.environ)
            full_env.update(env)
        try:
            return subprocess.run(
                argv,
                check=True,
                cwd=str(cwd) if cwd is not None else None,
                env=full_env,
                input=input,
                timeout=timeout,
                text=True,
                capture_output=capture,
            )
        except FileNotFoundError as e:
            raise CommandFailedError(argv, reason=f"{argv[0]} not found") from e
        except subprocess.TimeoutExpired as e:
            raise CommandFailedError(argv, reason=f"timed out after {timeout:g} seconds") from e
        except subprocess.CalledProcessError as e:
            raise CommandFailedError(argv, returncode=e.returncode) from e

    # ---------- Files ----------

    def append_lines(self, path: Path, lines: Iterable[str]) -> None:
        """Append each line verbatim, newline-terminated, creating *path* if needed."""
        lines = list(lines)
        if not lines:
            return
        for line in lines:
            self._echo(f"echo {shlex.quote(line)} >> {shlex.quote(str(path))}")
        if self.dry_run:
            return
        try:
            ensure_dir(path.parent)
            with open(path, "a", encoding="utf-8") as f:
                for line in lines:
                    f.write(f"{line}\n")
        except OSError as e:
            raise FileOperationError("append to", path, e) from e

    def append_text(self, path: Path, text: str) -> None:
        """Append a block of text, making sure it ends with a newline."""
        self.append_lines(path, text.rstrip("\n").split("\n"))

    def write_file(self, path: Path, text: str, mode: int | None = None) -> None:
        self._echo(f"cat > {shlex.quote(str(path))}")
        if self.dry_run:
            return
        try:
            ensure_dir(path.parent)
            path.write_text(text, encoding="utf-8")
            if mode is not None:
                os.chmod(path, mode)
        except OSError as e:
            raise FileOperationError("write", path, e) from e

    def remove_file(self, path: Path) -> None:
        """Remove *path*; a missing file is not an error."""
        self._echo(f"rm -f {shlex.quote(str(path))}")
        if self.dry_run:
            return
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise FileOperationError("remove", path, e) from e

    def clear_dir(self, path: Path) -> None:
        """Empty *path* (``rm -rf path/*``); a missing directory is not an error."""
        self._echo(f"rm -rf {shlex.quote(str(path))}/*")
        if self.dry_run:
            return
        try:
            clear_dir(path)
        except OSError as e:
            raise FileOperationError("clear", path, e) from e

    def remove_tree(self, path: Path) -> None:
        """Remove *path* recursively; a missing path is not an error."""
        self._echo(f"rm -rf {shlex.quote(str(path))}")
        if self.dry_run:
            return
        try:
            remove_tree(path)
        except OSError as e:
            raise FileOperationError("remove", path, e) from e

    def make_dirs(self, path: Path, mode: int | None = None) -> None:
        flags = "-p" if mode is None else f"-p -m {mode:o}"
        self._echo(f"mkdir {flags} {shlex.quote(str(path))}")
        if self.dry_run:
            return
        try:
            ensure_dir(path, mode)
        except OSError as e:
            raise FileOperationError("create", path, e) from e

    def chown(self, path: Path, user: str, group: str) -> None:
        """Recursively change ownership of *path* to ``user:group``."""
        self._echo(f"chown -R {user}:{group} {shlex.quote(str(path))}")
        if self.dry_run:
            return
        try:
            chown_tree(path, user, group)
        except KeyError as e:
            raise FileOperationError(f"chown to {user}:{group}", path, e) from e
        except OSError as e:
            raise FileOperationError("chown", path, e) from e
