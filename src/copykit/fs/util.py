import os
import stat
from pathlib import Path

from ._io import io_call
from .errors import (
    AlreadyExistsError,
    DestinationIsSubdirectoryError,
    SamePathError,
    TypeMismatchError,
    UnsupportedEntryError,
)
from .spec import (
    EnumEntryKind,
    EnumOverwriteAction,
    SpecCopyOptions,
    TypeIoPlan,
    TypePathLike,
)

################################################################################
# #region Path


def normalize_path(path: TypePathLike) -> Path:
    """Make a path absolute and fold ``.``/``..`` segments lexically.

    Args:
        path: Path to normalize.

    Returns:
        Absolute path; the filesystem is not consulted.
    """
    return Path(os.path.abspath(path))


def canonicalize_path(path: Path) -> Path:
    """Resolve symlinks in the parent chain of ``path``, keeping its last component.

    The last component is left alone so that a symlink is identified by its own
    location rather than by whatever it points at.

    Args:
        path: Absolute, lexically normalized path.

    Returns:
        Canonical path (best-effort, missing components are allowed).
    """
    if path.parent == path:
        return Path(os.path.realpath(path))
    return Path(os.path.realpath(path.parent)) / path.name


def is_strict_subpath(path: Path, base: Path) -> bool:
    """Check whether ``path`` lies strictly below ``base``.

    Args:
        path: Path to test.
        base: Candidate ancestor.

    Returns:
        True if ``path`` is nested inside ``base`` (equality is not nesting).
    """
    return path != base and path.is_relative_to(base)


def validate_copy_paths(
    src: TypePathLike, dst: TypePathLike
) -> TypeIoPlan[tuple[Path, Path]]:
    """Reject self-copies and copies into the source's own subtree.

    Both the lexical and the canonical forms are compared, so neither
    ``./a/../a/b`` nor a symlinked parent directory can sneak the destination
    inside the source.

    Args:
        src: Source path as given by the caller.
        dst: Destination path as given by the caller.

    Returns:
        The lexically normalized ``(src, dst)`` pair used for the rest of the copy.

    Raises:
        SamePathError: If both paths name the same location.
        DestinationIsSubdirectoryError: If ``dst`` is nested inside ``src``.
    """
    path_src = normalize_path(src)
    path_dst = normalize_path(dst)
    if path_src == path_dst:
        raise SamePathError()

    path_src_real: Path = yield io_call(canonicalize_path, path_src)
    path_dst_real: Path = yield io_call(canonicalize_path, path_dst)
    if path_src_real == path_dst_real:
        raise SamePathError()

    if is_strict_subpath(path_dst, path_src) or is_strict_subpath(
        path_dst_real, path_src_real
    ):
        raise DestinationIsSubdirectoryError(path_src, path_dst)

    return path_src, path_dst


# #endregion
################################################################################
# #region EntryKind


def derive_entry_kind(path: Path, stat_entry: os.stat_result) -> EnumEntryKind:
    """Map an ``lstat`` result onto an ``EnumEntryKind``.

    Raises:
        UnsupportedEntryError: For FIFOs, sockets, devices and other special files.
    """
    n_mode = stat_entry.st_mode
    if stat.S_ISLNK(n_mode):
        return EnumEntryKind.SYMLINK
    if stat.S_ISDIR(n_mode):
        return EnumEntryKind.DIRECTORY
    if stat.S_ISREG(n_mode):
        return EnumEntryKind.FILE
    raise UnsupportedEntryError(path, n_mode)


def classify_entry(path: Path) -> TypeIoPlan[tuple[EnumEntryKind, os.stat_result]]:
    """Classify ``path`` without following it.

    A symlink is reported as ``SYMLINK`` whatever it points at, dangling or not.

    Args:
        path: Entry to inspect.

    Returns:
        The entry kind and the ``lstat`` result it was derived from.

    Raises:
        FileNotFoundError: If nothing exists at ``path``.
        OSError: Any other inspection failure, unchanged.
    """
    stat_entry: os.stat_result = yield io_call(os.lstat, path)
    return derive_entry_kind(path, stat_entry), stat_entry


# #endregion
################################################################################
# #region OverwritePolicy


def check_destination(
    path_src: Path,
    path_dst: Path,
    kind_src: EnumEntryKind,
    options: SpecCopyOptions,
) -> TypeIoPlan[EnumOverwriteAction]:
    """Decide whether ``path_dst`` may receive an entry of ``kind_src``.

    A directory is never swapped for a non-directory or the other way round,
    even with ``overwrite``. A symlink at the destination counts as a
    non-directory.

    Args:
        path_src: Source path, used in error messages.
        path_dst: Destination path to inspect.
        kind_src: Kind of the incoming entry.
        options: Copy options.

    Returns:
        ``PROCEED_FRESH`` if nothing is there, ``PROCEED_REPLACE`` if the existing
        entry may be replaced.

    Raises:
        TypeMismatchError: If directory-ness of source and destination differ.
        AlreadyExistsError: If the destination exists and ``overwrite`` is off.
    """
    try:
        stat_dst: os.stat_result = yield io_call(os.lstat, path_dst)
    except FileNotFoundError:
        return EnumOverwriteAction.PROCEED_FRESH

    b_is_src_dir = kind_src is EnumEntryKind.DIRECTORY
    b_is_dst_dir = stat.S_ISDIR(stat_dst.st_mode)

    if b_is_src_dir and not b_is_dst_dir:
        raise TypeMismatchError(path_src, path_dst, is_src_directory=True)
    if not options.overwrite:
        raise AlreadyExistsError(path_dst)
    if b_is_dst_dir and not b_is_src_dir:
        raise TypeMismatchError(path_src, path_dst, is_src_directory=False)
    return EnumOverwriteAction.PROCEED_REPLACE


# #endregion
################################################################################
