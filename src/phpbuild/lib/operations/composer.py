"""Two-step composer dependency installation.

Dependencies are installed early (so the Docker layer can be cached) without
running scripts or generating the autoloader; the optimized autoloader is
dumped once the application sources are in place.
"""

from ..context import BuildContext


def composer_install_no_parameters(ctx: BuildContext, *args: str) -> None:
    """Install composer dependencies without scripts or autoloader."""
    ctx.runner.step("Installing composer dependencies")
    ctx.runner.run(
        ["composer", "install", "--no-interaction", "--no-scripts", "--no-autoloader", *args],
        cwd=ctx.config.source_dir,
    )


def composer_dump_autoload(ctx: BuildContext, *args: str) -> None:
    """Generate the optimized composer autoloader."""
    ctx.runner.step("Dumping composer autoloader")
    ctx.runner.run(
        ["composer", "dump-autoload", "--no-interaction", "--optimize", *args],
        cwd=ctx.config.source_dir,
    )
