"""Idempotent "make sure this exists" helpers, blocking and suspending.

Each helper is a no-op when a matching entry is already present and raises
``EnsureTypeError`` when something of another kind is in the way. Nothing is
ever deleted to make room.
"""

import os
import stat
from pathlib import Path

from ._io import io_call, run_plan_blocking, run_plan_suspending
from .errors import AlreadyExistsError, EnsureTypeError
from .spec import TypeIoPlan, TypePathLike
from .util import normalize_path


def describe_entry_mode(n_mode: int) -> str:
    if stat.S_ISLNK(n_mode):
        return "symlink"
    if stat.S_ISDIR(n_mode):
        return "dir"
    if stat.S_ISREG(n_mode):
        return "file"
    return "other"


def _create_empty_file(path: Path) -> None:
    # "x" so a file appearing concurrently is never truncated
    with open(path, "xb"):
        pass


################################################################################
# #region Plans


def _plan_ensure_dir(path: Path) -> TypeIoPlan[Path]:
    try:
        stat_entry: os.stat_result = yield io_call(os.lstat, path)
    except FileNotFoundError:
        try:
            yield io_call(os.makedirs, path)
            return path
        except FileExistsError:
            stat_entry = yield io_call(os.lstat, path)

    if not stat.S_ISDIR(stat_entry.st_mode):
        raise EnsureTypeError(path, "dir", describe_entry_mode(stat_entry.st_mode))
    return path


def _plan_ensure_file(path: Path) -> TypeIoPlan[Path]:
    try:
        stat_entry: os.stat_result = yield io_call(os.lstat, path)
    except FileNotFoundError:
        yield from _plan_ensure_dir(path.parent)
        try:
            yield io_call(_create_empty_file, path)
            return path
        except FileExistsError:
            stat_entry = yield io_call(os.lstat, path)

    if not stat.S_ISREG(stat_entry.st_mode):
        raise EnsureTypeError(path, "file", describe_entry_mode(stat_entry.st_mode))
    return path


def _plan_ensure_symlink(target: TypePathLike, path_link: Path) -> TypeIoPlan[Path]:
    c_target = os.fspath(target)
    try:
        stat_entry: os.stat_result = yield io_call(os.lstat, path_link)
    except FileNotFoundError:
        # relative targets are interpreted from the link's directory
        path_target = path_link.parent / c_target
        stat_target: os.stat_result = yield io_call(os.lstat, path_target)
        yield from _plan_ensure_dir(path_link.parent)
        yield io_call(
            os.symlink,
            c_target,
            path_link,
            target_is_directory=stat.S_ISDIR(stat_target.st_mode),
        )
        return path_link

    if not stat.S_ISLNK(stat_entry.st_mode):
        raise EnsureTypeError(
            path_link, "symlink", describe_entry_mode(stat_entry.st_mode)
        )
    c_existing: str = yield io_call(os.readlink, path_link)
    if c_existing != c_target:
        raise AlreadyExistsError(path_link)
    return path_link


def _plan_exists(path: Path) -> TypeIoPlan[bool]:
    return (yield io_call(os.path.lexists, path))


# #endregion
################################################################################
# #region Blocking


def ensure_dir_sync(path: TypePathLike) -> Path:
    """Create ``path`` and its parents unless it is already a directory.

    Raises:
        EnsureTypeError: If a non-directory entry (symlinks included) is in the way.
    """
    return run_plan_blocking(_plan_ensure_dir(normalize_path(path)))


def ensure_file_sync(path: TypePathLike) -> Path:
    """Create an empty file at ``path`` (parents included) unless one exists.

    Raises:
        EnsureTypeError: If a non-file entry is in the way.
    """
    return run_plan_blocking(_plan_ensure_file(normalize_path(path)))


def ensure_symlink_sync(target: TypePathLike, link: TypePathLike) -> Path:
    """Create ``link`` pointing at ``target`` unless it already does.

    Args:
        target: Raw link target; relative targets resolve from the link's directory.
        link: Where the link is created. Missing parents are created.

    Raises:
        FileNotFoundError: If ``target`` does not exist.
        EnsureTypeError: If a non-link entry sits at ``link``.
        AlreadyExistsError: If ``link`` points somewhere else.
    """
    return run_plan_blocking(_plan_ensure_symlink(target, normalize_path(link)))


def exists_sync(path: TypePathLike) -> bool:
    """Check for an entry at ``path`` without following it; dangling links exist."""
    return run_plan_blocking(_plan_exists(normalize_path(path)))


# #endregion
################################################################################
# #region Suspending


async def ensure_dir(path: TypePathLike) -> Path:
    return await run_plan_suspending(_plan_ensure_dir(normalize_path(path)))


async def ensure_file(path: TypePathLike) -> Path:
    return await run_plan_suspending(_plan_ensure_file(normalize_path(path)))


async def ensure_symlink(target: TypePathLike, link: TypePathLike) -> Path:
    return await run_plan_suspending(
        _plan_ensure_symlink(target, normalize_path(link))
    )


async def exists(path: TypePathLike) -> bool:
    return await run_plan_suspending(_plan_exists(normalize_path(path)))


# #endregion
################################################################################
