# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""PHP version parsing for picking extension install targets.

Extension setup distinguishes PHP 7 and later from PHP 5 and earlier.  The
comparison is done on the parsed major version so that ``7.10`` and ``10.0``
land on the right side of the boundary.
"""

from packaging.version import InvalidVersion, Version

from ..errors import UsageError

MODERN_PHP_MAJOR = 7


def parse_php_version(raw: str) -> Version:
    text = (raw or "").strip()
    if not text:
        raise UsageError("PHP version is empty")
    # Docker images and older scripts sometimes use bare prefixes like "7."
    text = text.rstrip(".")
    try:
        return Version(text)
    except InvalidVersion as e:
        raise UsageError(f"Unrecognized PHP version: {raw!r}") from e


def is_modern_php(raw: str) -> bool:
    """Return True for PHP 7 and later."""
    return parse_php_version(raw).major >= MODERN_PHP_MAJOR
