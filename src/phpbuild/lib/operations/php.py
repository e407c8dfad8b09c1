# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""PHP extension installation and php.ini composition."""

import re
from collections.abc import Sequence
from pathlib import Path

from ..context import BuildContext
from ..core.config import PHP_TARGETS
from ..core.php_version import is_modern_php
from ..errors import InvalidTargetError, UsageError
from .packages import split_names

PEAR_TMP_DIR = Path("/tmp/pear")
ALL_TARGETS = "all"

XDEBUG_PECL = {True: "xdebug", False: "xdebug-2.5.5"}
XDEBUG_SETTINGS = {
    True: [
        "xdebug.mode=debug",
        "xdebug.client_host=host.docker.internal",
        "xdebug.start_with_request=trigger",
    ],
    False: [
        "xdebug.remote_enable=1",
        "xdebug.remote_connect_back=0",
        "xdebug.remote_host=host.docker.internal",
    ],
}

APCU_PECL = {True: "apcu", False: "apcu-4.0.11"}
APCU_SETTINGS = [
    "apc.enabled=1",
    "apc.enable_cli=1",
    "apc.shm_size=64M",
]

_PECL_VERSION_SUFFIX = re.compile(r"-\d[\w.]*$")


# ---------- php.ini ----------


def configure_php(ctx: BuildContext, target: str | None = None, *lines: str) -> None:
    """Append literal php.ini lines for the cli, fpm or all targets."""
    if target == ALL_TARGETS:
        for single in PHP_TARGETS:
            configure_php(ctx, single, *lines)
        return
    if target not in PHP_TARGETS:
        raise InvalidTargetError(target, (*PHP_TARGETS, ALL_TARGETS))
    ctx.runner.append_lines(ctx.config.ini_file(target), lines)


def php_config_target(ctx: BuildContext) -> str:
    """Extension directives go to both ini files when CONFIGURE_PHP_FPM is set."""
    return ALL_TARGETS if ctx.env_flag("CONFIGURE_PHP_FPM") else "cli"


# ---------- Extensions ----------


def install_php_extensions(ctx: BuildContext, *names: str) -> None:
    """Compile bundled PHP extensions with docker-php-ext-install."""
    extensions = split_names(names)
    if not extensions:
        raise UsageError("install_php_extensions: no extension names given")
    runner = ctx.runner
    runner.step(f"Installing PHP extensions: {' '.join(extensions)}")
    runner.run(["docker-php-ext-install", f"-j{ctx.config.ext_install_jobs}", *extensions])
    runner.run(["docker-php-source", "delete"])


def install_symfony_php_extensions(ctx: BuildContext, *names: str) -> None:
    """Install the PHP extensions a Symfony application needs, plus any extras given."""
    install_php_extensions(ctx, *ctx.config.symfony_extensions, *names)


def pecl_module_name(spec: str) -> str:
    """``xdebug-2.5.5`` -> ``xdebug``."""
    return _PECL_VERSION_SUFFIX.sub("", spec)


def _pecl_install(ctx: BuildContext, specs: Sequence[str], *, enable: bool = False) -> None:
    # pecl asks configure questions on stdin; empty answers take the defaults.
    ctx.runner.run(["pecl", "install", *specs], input="\n" * 16)
    if enable:
        ctx.runner.run(["docker-php-ext-enable", *(pecl_module_name(s) for s in specs)])
    ctx.runner.remove_tree(PEAR_TMP_DIR)


def install_pecl_extensions(ctx: BuildContext, *names: str) -> None:
    """Install PECL extensions and enable them."""
    specs = split_names(names)
    if not specs:
        raise UsageError("install_pecl_extensions: no extension names given")
    ctx.runner.step(f"Installing PECL extensions: {' '.join(specs)}")
    _pecl_install(ctx, specs, enable=True)


def _php_version(ctx: BuildContext, operation: str, args: Sequence[str]) -> str:
    if len(args) > 1:
        raise UsageError(f"{operation} takes at most one argument (the PHP version)")
    raw = args[0] if args else ctx.environ.get("PHP_VERSION", "")
    if not raw:
        raise UsageError(
            f"{operation}: PHP version unknown",
            hint="Pass it as an argument or set PHP_VERSION in the Dockerfile.",
        )
    return raw


def install_xdebug(ctx: BuildContext, *args: str) -> None:
    """Install and enable Xdebug for the running PHP version."""
    modern = is_modern_php(_php_version(ctx, "install_xdebug", args))
    spec = XDEBUG_PECL[modern]
    ctx.runner.step(f"Installing {spec}")
    _pecl_install(ctx, [spec])
    configure_php(
        ctx,
        php_config_target(ctx),
        "zend_extension=xdebug.so",
        *XDEBUG_SETTINGS[modern],
    )


def install_apcu(ctx: BuildContext, *args: str) -> None:
    """Install and enable APCu for the running PHP version."""
    modern = is_modern_php(_php_version(ctx, "install_apcu", args))
    spec = APCU_PECL[modern]
    ctx.runner.step(f"Installing {spec}")
    _pecl_install(ctx, [spec])
    configure_php(ctx, php_config_target(ctx), "extension=apcu.so", *APCU_SETTINGS)
