import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml  # pip install pyyaml

from ..errors import ConfigError
from .paths import user_config_root

# ---------- Defaults ----------

DEFAULTS: dict[str, Any] = {
    "paths": {
        "php_ini_cli": "/usr/local/etc/php/php-cli.ini",
        "php_ini_fpm": "/usr/local/etc/php/php.ini",
        "source_dir": "/srv",
        "home_dir": "/var/www",
        # Derived from home_dir / user.name when left unset.
        "cache_dir": None,
        "sudoers_file": None,
    },
    "user": {
        "name": "www-data",
        "group": "www-data",
    },
    "packages": {
        "pre_build": ["sudo", "git", "openssh-client", "unzip", "zip"],
        "symfony": ["libicu-dev", "libzip-dev", "zlib1g-dev", "libxml2-dev"],
    },
    "php": {
        "symfony_extensions": ["intl", "opcache", "pdo_mysql", "zip"],
        "ext_install_jobs": None,
    },
    "ssh": {
        "hosts": ["github.com", "bitbucket.org"],
        "key_type": "rsa",
        "keyscan_timeout": 120,
    },
}

PHP_TARGETS = ("cli", "fpm")


@dataclass(frozen=True)
class BuildConfig:
    """Resolved, immutable settings shared by every provisioning operation."""

    php_ini_cli: Path
    php_ini_fpm: Path
    source_dir: Path
    home_dir: Path
    cache_dir: Path
    sudoers_file: Path
    service_user: str
    service_group: str
    pre_build_packages: tuple[str, ...]
    symfony_packages: tuple[str, ...]
    symfony_extensions: tuple[str, ...]
    ext_install_jobs: int
    known_hosts_hosts: tuple[str, ...]
    ssh_key_type: str
    keyscan_timeout: int
    source: Path | None = None

    @property
    def ssh_dir(self) -> Path:
        return self.home_dir / ".ssh"

    @property
    def known_hosts_file(self) -> Path:
        return self.ssh_dir / "known_hosts"

    def ini_file(self, target: str) -> Path:
        """Return the php.ini path for a single target ("cli" or "fpm")."""
        if target == "cli":
            return self.php_ini_cli
        if target == "fpm":
            return self.php_ini_fpm
        raise KeyError(target)


# ---------- Config file discovery ----------


def config_search_paths(explicit: str | Path | None = None) -> list[Path]:
    """Return the ordered list of paths that will be checked for a config file.

    - An explicit path (``--config``) or PHPBUILD_CONFIG_FILE is the only
      candidate when given.
    - Otherwise, check in order:
        1) ./phpbuild.yml (next to the Dockerfile build context)
        2) ${XDG_CONFIG_HOME:-~/.config}/phpbuild/config.yml
        3) /etc/phpbuild/config.yml
    """
    if explicit:
        return [Path(explicit).expanduser().resolve()]
    env_file = os.environ.get("PHPBUILD_CONFIG_FILE")
    if env_file:
        return [Path(env_file).expanduser().resolve()]

    return [
        Path.cwd() / "phpbuild.yml",
        user_config_root() / "config.yml",
        Path("/etc/phpbuild/config.yml"),
    ]


def config_path(explicit: str | Path | None = None) -> Path | None:
    """Return the config file to load, or None when no candidate exists.

    An explicit override is returned even if missing so the caller can show
    which file was requested.
    """
    candidates = config_search_paths(explicit)
    if explicit or os.environ.get("PHPBUILD_CONFIG_FILE"):
        return candidates[0]
    for c in candidates:
        if c.is_file():
            return c.resolve()
    return None


def load_config_data(path: Path | None) -> dict[str, Any]:
    if path is None or not path.is_file():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at the top level")
    return data


# ---------- Merging ----------


def deep_merge(base: dict, override: dict) -> dict:
    """Merge *override* into a copy of *base*.

    Nested dicts merge key by key; any other value (lists included) replaces
    the base value wholesale.
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _section(data: dict, key: str) -> dict:
    value = data.get(key)
    if not isinstance(value, dict):
        raise ConfigError(f"Config section '{key}' must be a mapping")
    return value


def _names(section: dict, key: str) -> tuple[str, ...]:
    value = section.get(key) or []
    if isinstance(value, str):
        value = value.split()
    if not isinstance(value, list):
        raise ConfigError(f"Config value '{key}' must be a list of names")
    return tuple(str(v) for v in value)


def _int(section: dict, key: str, default: int) -> int:
    value = section.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Config value '{key}' must be an integer, got {value!r}") from e


def _path(section: dict, key: str) -> Path:
    value = section.get(key)
    if value is None or not str(value).strip():
        raise ConfigError(f"Config value '{key}' must be a path")
    return Path(str(value)).expanduser()


def build_config(data: dict[str, Any], source: Path | None = None) -> BuildConfig:
    """Overlay *data* on the built-in defaults and freeze the result."""
    merged = deep_merge(DEFAULTS, data)
    paths = _section(merged, "paths")
    user = _section(merged, "user")
    packages = _section(merged, "packages")
    php = _section(merged, "php")
    ssh = _section(merged, "ssh")

    service_user = str(user.get("name") or DEFAULTS["user"]["name"])
    service_group = str(user.get("group") or service_user)
    home_dir = _path(paths, "home_dir")
    cache_dir = _path(paths, "cache_dir") if paths.get("cache_dir") else home_dir / ".composer"
    sudoers_file = (
        _path(paths, "sudoers_file")
        if paths.get("sudoers_file")
        else Path("/etc/sudoers.d") / service_user
    )

    return BuildConfig(
        php_ini_cli=_path(paths, "php_ini_cli"),
        php_ini_fpm=_path(paths, "php_ini_fpm"),
        source_dir=_path(paths, "source_dir"),
        home_dir=home_dir,
        cache_dir=cache_dir,
        sudoers_file=sudoers_file,
        service_user=service_user,
        service_group=service_group,
        pre_build_packages=_names(packages, "pre_build"),
        symfony_packages=_names(packages, "symfony"),
        symfony_extensions=_names(php, "symfony_extensions"),
        ext_install_jobs=_int(php, "ext_install_jobs", os.cpu_count() or 1),
        known_hosts_hosts=_names(ssh, "hosts"),
        ssh_key_type=str(ssh.get("key_type") or "rsa"),
        keyscan_timeout=_int(ssh, "keyscan_timeout", 120),
        source=source,
    )


def load_config(explicit: str | Path | None = None) -> BuildConfig:
    """Resolve the config file, load it and build the immutable config."""
    path = config_path(explicit)
    return build_config(load_config_data(path), source=path)
