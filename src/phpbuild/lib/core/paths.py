# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Platform-aware path resolution for phpbuild's own state directory."""

import getpass
import os
from pathlib import Path

from platformdirs import user_config_dir, user_data_dir

APP_NAME = "phpbuild"


def _is_root() -> bool:
    """Return True if the current process is running as root."""
    try:
        return os.geteuid() == 0  # type: ignore[attr-defined]
    except AttributeError:
        return getpass.getuser() == "root"


def user_config_root() -> Path:
    """
    Per-user configuration directory.

    Priority:
      1. ${XDG_CONFIG_HOME}/phpbuild
      2. platformdirs user config dir (~/.config/phpbuild on Linux)
    """
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path(user_config_dir(APP_NAME))


def state_root() -> Path:
    """
    Writable state (debug log).

    Priority:
      1. PHPBUILD_STATE_DIR
      2. if root   → /var/lib/phpbuild
         else      → platformdirs user data dir (~/.local/share/phpbuild)
    """
    env = os.getenv("PHPBUILD_STATE_DIR")
    if env:
        return Path(env).expanduser()

    if _is_root():
        return Path("/var/lib") / APP_NAME

    return Path(user_data_dir(APP_NAME))
