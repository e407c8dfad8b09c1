"""phpbuild package.

Modules:
- phpbuild.cli: CLI entry point package (phpbuild)
- phpbuild.lib.registry: the named provisioning operations
- phpbuild.lib.operations: packages, PHP extensions, php.ini, SSH, sudo, composer
- phpbuild.lib.core: Configuration, paths, PHP version handling
- phpbuild.lib._util: Internal helpers (fs, ANSI colors, logging)
"""

from importlib.metadata import PackageNotFoundError, version

__all__ = ["cli", "lib"]

# Version information - single source of truth using importlib.metadata
try:
    __version__ = version("phpbuild")
except PackageNotFoundError:
    # Running from a source checkout that was never installed
    __version__ = "unknown"
