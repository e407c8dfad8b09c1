"""OS package installation through apt-get."""

from collections.abc import Iterable
from pathlib import Path

from ..context import BuildContext
from ..errors import UsageError

APT_LISTS_DIR = Path("/var/lib/apt/lists")
APT_ENV = {"DEBIAN_FRONTEND": "noninteractive"}


def split_names(args: Iterable[str]) -> list[str]:
    """Flatten arguments that may each hold several whitespace-separated names."""
    names: list[str] = []
    for arg in args:
        names.extend(arg.split())
    return names


def install_packages(ctx: BuildContext, *names: str) -> None:
    """Install OS packages with apt-get and clean the apt caches."""
    packages = split_names(names)
    if not packages:
        raise UsageError("install_packages: no package names given")

    runner = ctx.runner
    runner.step(f"Installing OS packages: {' '.join(packages)}")
    runner.run(["apt-get", "update"], env=APT_ENV)
    runner.run(
        ["apt-get", "install", "-y", "--no-install-recommends", *packages],
        env=APT_ENV,
    )
    runner.run(["apt-get", "clean"], env=APT_ENV)
    runner.clear_dir(APT_LISTS_DIR)


def install_symfony_packages(ctx: BuildContext, *names: str) -> None:
    """Install the OS packages a Symfony application needs, plus any extras given."""
    install_packages(ctx, *ctx.config.symfony_packages, *names)
