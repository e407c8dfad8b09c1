# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""The closed set of provisioning operations exposed on the command line."""

import inspect
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

from .context import BuildContext
from .errors import UnknownCommandError
from .operations.composer import composer_dump_autoload, composer_install_no_parameters
from .operations.lifecycle import create_dirs, post_build, pre_build
from .operations.packages import install_packages, install_symfony_packages
from .operations.php import (
    configure_php,
    install_apcu,
    install_pecl_extensions,
    install_php_extensions,
    install_symfony_php_extensions,
    install_xdebug,
)
from .operations.ssh import add_ssh_keys_for_typical_hosting_services
from .operations.sudo import add_sudo_rights, remove_sudo_rights


@dataclass(frozen=True)
class Operation:
    name: str
    handler: Callable[..., None]
    usage: str = ""

    @property
    def summary(self) -> str:
        doc = inspect.getdoc(self.handler)
        return doc.split("\n")[0] if doc else ""

    def __call__(self, ctx: BuildContext, args: Sequence[str]) -> None:
        self.handler(ctx, *args)


def _validate(operations: Mapping[str, Operation]) -> None:
    """Fail at import time if an operation is wired up incorrectly."""
    for name, op in operations.items():
        if name != op.name or not name.isidentifier():
            raise ValueError(f"bad operation name {name!r}")
        params = list(inspect.signature(op.handler).parameters.values())
        if not params or params[0].name != "ctx":
            raise ValueError(f"first argument to operation {name!r} must be ctx")


def _register(*ops: Operation) -> dict[str, Operation]:
    table = {op.name: op for op in ops}
    _validate(table)
    return table


OPERATIONS: dict[str, Operation] = _register(
    Operation("pre_build", pre_build),
    Operation("post_build", post_build),
    Operation("install_packages", install_packages, "PACKAGE..."),
    Operation("install_symfony_packages", install_symfony_packages, "[PACKAGE...]"),
    Operation("install_php_extensions", install_php_extensions, "EXTENSION..."),
    Operation("install_symfony_php_extensions", install_symfony_php_extensions, "[EXTENSION...]"),
    Operation("install_pecl_extensions", install_pecl_extensions, "EXTENSION[-VERSION]..."),
    Operation("configure_php", configure_php, "cli|fpm|all LINE..."),
    Operation("install_xdebug", install_xdebug, "[PHP_VERSION]"),
    Operation("install_apcu", install_apcu, "[PHP_VERSION]"),
    Operation("add_ssh_keys_for_typical_hosting_services", add_ssh_keys_for_typical_hosting_services),
    Operation("add_sudo_rights", add_sudo_rights),
    Operation("remove_sudo_rights", remove_sudo_rights),
    Operation("create_dirs", create_dirs),
    Operation("composer_install_no_parameters", composer_install_no_parameters, "[COMPOSER_ARG...]"),
    Operation("composer_dump_autoload", composer_dump_autoload, "[COMPOSER_ARG...]"),
)


def resolve(name: str) -> Operation:
    """Look up an operation; ``pre-build`` is accepted as a spelling of ``pre_build``."""
    op = OPERATIONS.get(name) or OPERATIONS.get(name.replace("-", "_"))
    if op is None:
        raise UnknownCommandError(name, OPERATIONS)
    return op
