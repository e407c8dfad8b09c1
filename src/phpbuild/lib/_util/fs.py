import grp
import os
import pwd
import shutil
from collections.abc import Iterator
from pathlib import Path


def ensure_dir(path: Path, mode: int | None = None) -> None:
    """Create a directory (and parents) if it doesn't exist."""
    path.mkdir(parents=True, exist_ok=True)
    if mode is not None:
        os.chmod(path, mode)


def walk_tree(root: Path) -> Iterator[Path]:
    """Yield *root* and everything below it, without following symlinks."""
    yield root
    if not root.is_dir() or root.is_symlink():
        return
    for dirpath, dirnames, filenames in os.walk(root):
        base = Path(dirpath)
        for name in dirnames + filenames:
            yield base / name


def chown_tree(root: Path, user: str, group: str) -> None:
    """Recursively hand *root* over to ``user:group`` (like ``chown -R``).

    Raises KeyError when the user or group does not exist.
    """
    uid = pwd.getpwnam(user).pw_uid
    gid = grp.getgrnam(group).gr_gid
    for path in walk_tree(root):
        os.lchown(path, uid, gid)


def clear_dir(path: Path) -> None:
    """Remove everything inside *path*, keeping the directory itself."""
    if not path.is_dir():
        return
    for child in path.iterdir():
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child)
        else:
            child.unlink()


def remove_tree(path: Path) -> None:
    """Remove *path* and everything below it (``rm -rf``)."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink(missing_ok=True)
