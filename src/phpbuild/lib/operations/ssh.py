# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Known-hosts provisioning for git hosting services."""

from ..context import BuildContext
from ..errors import EmptyHostKeyError, UsageError

SSH_DIR_MODE = 0o700


def scan_host_key(ctx: BuildContext, host: str) -> str:
    """Return the public host key lines published by *host*."""
    cfg = ctx.config
    return ctx.runner.capture(
        ["ssh-keyscan", "-t", cfg.ssh_key_type, host],
        timeout=cfg.keyscan_timeout,
    )


def add_ssh_keys_for_typical_hosting_services(ctx: BuildContext, *args: str) -> None:
    """Pre-populate known_hosts so composer can clone over SSH without prompts.

    Each configured host is scanned in turn and its key appended to the
    service user's known_hosts.  An empty scan aborts the build before the
    ``.ssh`` directory is handed over to the service user.
    """
    if args:
        raise UsageError("add_ssh_keys_for_typical_hosting_services takes no arguments")

    cfg = ctx.config
    runner = ctx.runner
    runner.step(f"Adding SSH host keys for {', '.join(cfg.known_hosts_hosts)}")
    runner.make_dirs(cfg.ssh_dir, mode=SSH_DIR_MODE)

    for host in cfg.known_hosts_hosts:
        keys = scan_host_key(ctx, host)
        if runner.dry_run:
            continue
        if not keys.strip():
            raise EmptyHostKeyError(host)
        runner.append_text(cfg.known_hosts_file, keys)

    runner.chown(cfg.ssh_dir, cfg.service_user, cfg.service_group)
