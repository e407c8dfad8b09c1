"""Utility functions for logging."""

import time

from ..core.paths import state_root

LOG_FILE_NAME = "phpbuild.log"


def _log_debug(message: str) -> None:
    """Append a timestamped debug line to the phpbuild log.

    Writes to ``state_root()/phpbuild.log``. Best-effort: any IO error is
    ignored so logging never aborts a build step.
    """
    try:
        log_path = state_root() / LOG_FILE_NAME
        log_path.parent.mkdir(parents=True, exist_ok=True)
        timestamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
        with open(log_path, "a", encoding="utf-8") as f:
            f.write(f"[{timestamp}] {message}\n")
    except OSError:
        pass
