#!/usr/bin/env python3

import argparse
import os
import sys
from pathlib import Path

import argcomplete

from .. import __version__
from ..lib._util.ansi import gray as _gray, red as _red, supports_color as _supports_color
from ..lib._util.ansi import yellow as _yellow, yes_no as _yes_no
from ..lib._util.logging_utils import _log_debug
from ..lib.context import BuildContext, env_flag
from ..lib.core.config import BuildConfig, config_search_paths, load_config
from ..lib.core.paths import state_root
from ..lib.errors import ProvisionError, UnknownCommandError
from ..lib.registry import OPERATIONS, resolve
from ..lib.runner import Runner

BUILTIN_COMMANDS = {
    "list": "List the available provisioning commands",
    "config": "Show the resolved configuration and config file search order",
}


def _complete_commands(prefix: str, parsed_args, **kwargs):  # pragma: no cover - shell integration
    names = [*BUILTIN_COMMANDS, *OPERATIONS]
    return [n for n in names if n.startswith(prefix)]


def _print_operations() -> None:
    width = max(len(n) for n in [*OPERATIONS, *BUILTIN_COMMANDS])
    print("Provisioning commands:")
    for op in OPERATIONS.values():
        print(f"  {op.name:<{width}}  {op.summary}")
        if op.usage:
            print(f"  {'':<{width}}    usage: phpbuild {op.name} {op.usage}")
    print("Other commands:")
    for name, help_text in BUILTIN_COMMANDS.items():
        print(f"  {name:<{width}}  {help_text}")


def _print_config(config: BuildConfig, explicit: str | None) -> None:
    """Display the resolved configuration and where it came from."""
    color_enabled = _supports_color()

    print("Configuration (read):")
    chosen = config.source
    if chosen is None:
        print("- Config file: none found, using built-in defaults")
    else:
        print(
            f"- Config file: {_gray(str(chosen), color_enabled)} "
            f"(exists: {_yes_no(chosen.is_file(), color_enabled)})"
        )
    print("- Config search order:")
    for p in config_search_paths(explicit):
        print(f"  • {_gray(str(p), color_enabled)} (exists: {_yes_no(p.is_file(), color_enabled)})")

    print("Paths:")
    for label, path in (
        ("CLI php.ini", config.php_ini_cli),
        ("FPM php.ini", config.php_ini_fpm),
        ("Source dir", config.source_dir),
        ("Home dir", config.home_dir),
        ("Cache dir", config.cache_dir),
        ("Sudoers drop-in", config.sudoers_file),
        ("Known hosts", config.known_hosts_file),
    ):
        print(
            f"- {label}: {_gray(str(path), color_enabled)} "
            f"(exists: {_yes_no(Path(path).exists(), color_enabled)})"
        )

    print(f"Service account: {config.service_user}:{config.service_group}")
    print(f"Pre-build packages: {' '.join(config.pre_build_packages) or '-'}")
    print(f"Symfony packages: {' '.join(config.symfony_packages) or '-'}")
    print(f"Symfony PHP extensions: {' '.join(config.symfony_extensions) or '-'}")
    print(f"Extension build jobs: {config.ext_install_jobs}")
    print(
        f"SSH hosts: {' '.join(config.known_hosts_hosts) or '-'} "
        f"(key type {config.ssh_key_type}, timeout {config.keyscan_timeout}s)"
    )
    print(f"Debug log: {_gray(str(state_root() / 'phpbuild.log'), color_enabled)}")


def _report_error(error: ProvisionError) -> None:
    color_enabled = _supports_color(sys.stderr)
    print(_red(f"phpbuild: {error}", color_enabled), file=sys.stderr)
    if error.hint:
        print(_yellow(error.hint, color_enabled), file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="phpbuild",
        description="phpbuild – provisioning helpers for PHP/Symfony Docker images",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Typical Dockerfile usage:\n"
            "  RUN phpbuild pre_build\n"
            "  RUN phpbuild install_symfony_packages && phpbuild install_symfony_php_extensions\n"
            "  RUN phpbuild install_apcu\n"
            "  RUN phpbuild configure_php all 'memory_limit=512M'\n"
            "  RUN phpbuild composer_install_no_parameters --prefer-dist\n"
            "  RUN phpbuild composer_dump_autoload --classmap-authoritative\n"
            "  RUN phpbuild post_build\n"
            "\n"
            "Run 'phpbuild list' for all commands.\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"phpbuild {__version__}")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print commands and file changes instead of performing them",
    )
    parser.add_argument(
        "--config",
        dest="config_file",
        default=None,
        help="YAML config file (default: search PHPBUILD_CONFIG_FILE, ./phpbuild.yml, ...)",
    )
    _a = parser.add_argument("command", nargs="?", help="Provisioning command (see 'phpbuild list')")
    _a.completer = _complete_commands  # type: ignore[attr-defined]
    parser.add_argument(
        "args",
        nargs=argparse.REMAINDER,
        help="Arguments forwarded verbatim to the command",
    )
    return parser


def _dispatch(args: argparse.Namespace, extras: list[str]) -> None:
    if extras:
        # A dash-prefixed word where the command should be.
        raise UnknownCommandError(extras[0], [*BUILTIN_COMMANDS, *OPERATIONS])
    if args.command == "list":
        _print_operations()
        return

    # Reject unknown names before touching any configuration.
    op = None if args.command == "config" else resolve(args.command)

    config = load_config(args.config_file)
    if op is None:
        _print_config(config, args.config_file)
        return

    runner = Runner(dry_run=args.dry_run or env_flag(os.environ.get("PHPBUILD_DRY_RUN")))
    ctx = BuildContext(config=config, runner=runner)
    _log_debug(f"invoke {op.name} args={args.args!r} dry_run={runner.dry_run}")
    op(ctx, args.args)
    _log_debug(f"done {op.name}")


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    argcomplete.autocomplete(parser)
    args, extras = parser.parse_known_args(argv)
    if args.command is None and not extras:
        parser.error("the following arguments are required: command")

    try:
        _dispatch(args, extras)
    except ProvisionError as e:
        _log_debug(f"error: {e}")
        _report_error(e)
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
