"""Temporary sudo rights for the service user during an image build."""

from ..context import BuildContext
from ..errors import UsageError

SUDOERS_MODE = 0o440


def sudoers_entry(user: str) -> str:
    return f"{user} ALL=(ALL) NOPASSWD: ALL\n"


def add_sudo_rights(ctx: BuildContext, *args: str) -> None:
    """Grant the service user passwordless sudo until post_build."""
    if args:
        raise UsageError("add_sudo_rights takes no arguments")
    cfg = ctx.config
    ctx.runner.step(f"Granting temporary sudo rights to {cfg.service_user}")
    ctx.runner.write_file(cfg.sudoers_file, sudoers_entry(cfg.service_user), mode=SUDOERS_MODE)


def remove_sudo_rights(ctx: BuildContext, *args: str) -> None:
    """Revoke the temporary sudo rights (no-op when they were never granted)."""
    if args:
        raise UsageError("remove_sudo_rights takes no arguments")
    cfg = ctx.config
    ctx.runner.step(f"Revoking temporary sudo rights of {cfg.service_user}")
    ctx.runner.remove_file(cfg.sudoers_file)
