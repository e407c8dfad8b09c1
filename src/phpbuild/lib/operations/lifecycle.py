"""Pre-build / post-build lifecycle of an application image."""

from ..context import BuildContext
from ..errors import UsageError
from .packages import install_packages
from .ssh import add_ssh_keys_for_typical_hosting_services
from .sudo import add_sudo_rights, remove_sudo_rights


def _no_args(operation: str, args: tuple[str, ...]) -> None:
    if args:
        raise UsageError(f"{operation} takes no arguments")


def create_dirs(ctx: BuildContext, *args: str) -> None:
    """Create the source and composer cache directories for the service user."""
    _no_args("create_dirs", args)
    cfg = ctx.config
    ctx.runner.step(f"Creating {cfg.source_dir} and {cfg.cache_dir}")
    for path in (cfg.source_dir, cfg.cache_dir):
        ctx.runner.make_dirs(path)
        ctx.runner.chown(path, cfg.service_user, cfg.service_group)


def pre_build(ctx: BuildContext, *args: str) -> None:
    """Prepare the image: base packages, temporary sudo, directories, SSH host keys."""
    _no_args("pre_build", args)
    install_packages(ctx, *ctx.config.pre_build_packages)
    add_sudo_rights(ctx)
    create_dirs(ctx)
    add_ssh_keys_for_typical_hosting_services(ctx)


def post_build(ctx: BuildContext, *args: str) -> None:
    """Finish the image: revoke the temporary sudo rights."""
    _no_args("post_build", args)
    remove_sudo_rights(ctx)
