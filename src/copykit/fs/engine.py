import os
import shutil
from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path
from typing import Any

from loguru import logger

from ._io import io_call, run_plan_blocking, run_plan_suspending
from .errors import CopyError, SourceNotFoundError
from .report import ReportCopy, ReportCopyBuilder
from .spec import (
    EnumEntryKind,
    EnumOverwriteAction,
    SpecCopyOperation,
    SpecCopyOptions,
    SpecIoCall,
    TypeIoPlan,
    TypePathLike,
)
from .util import check_destination, classify_entry, validate_copy_paths

################################################################################
# #region Primitives


def _write_file(
    path_src: Path, path_dst: Path, *, if_unlink_dst_link: bool = False
) -> None:
    # the source is opened before anything at the destination is touched
    with open(path_src, "rb") as f_src:
        if if_unlink_dst_link and os.path.islink(path_dst):
            os.unlink(path_dst)
        with open(path_dst, "wb") as f_dst:
            shutil.copyfileobj(f_src, f_dst)
    shutil.copymode(path_src, path_dst)


def _list_entry_names(path_dir: Path) -> list[str]:
    return sorted(os.listdir(path_dir))


def _step(call: SpecIoCall, operation: SpecCopyOperation) -> TypeIoPlan[Any]:
    """Issue one request on behalf of ``operation``, tagging OS errors with it."""
    try:
        return (yield call)
    except OSError as e:
        e.add_note(
            f"while copying {operation.kind} '{operation.path_src}' "
            f"to '{operation.path_dst}'"
        )
        raise


def _preserve_timestamps(
    operation: SpecCopyOperation, *, follow_symlinks: bool = True
) -> TypeIoPlan[None]:
    tuple_ns = (operation.stat_src.st_atime_ns, operation.stat_src.st_mtime_ns)
    if follow_symlinks:
        yield from _step(io_call(os.utime, operation.path_dst, ns=tuple_ns), operation)
        return
    if os.utime not in os.supports_follow_symlinks:
        logger.warning(
            f"Cannot preserve timestamps of symlink on this platform: {operation.path_dst}"
        )
        return
    yield from _step(
        io_call(os.utime, operation.path_dst, ns=tuple_ns, follow_symlinks=False),
        operation,
    )


# #endregion
################################################################################
# #region Replicators


def copy_symlink(
    operation: SpecCopyOperation, action: EnumOverwriteAction
) -> TypeIoPlan[None]:
    """Recreate a symlink with the same raw target; the target is never read."""
    c_target: str = yield from _step(io_call(os.readlink, operation.path_src), operation)
    if action is EnumOverwriteAction.PROCEED_REPLACE:
        yield from _step(io_call(os.unlink, operation.path_dst), operation)

    # only Windows distinguishes file and directory links
    b_is_dir_target = False
    if os.name == "nt":
        b_is_dir_target = yield io_call(os.path.isdir, operation.path_src)

    yield from _step(
        io_call(
            os.symlink,
            c_target,
            operation.path_dst,
            target_is_directory=b_is_dir_target,
        ),
        operation,
    )
    if operation.options.preserve_timestamps:
        yield from _preserve_timestamps(operation, follow_symlinks=False)


def copy_file(
    operation: SpecCopyOperation, action: EnumOverwriteAction
) -> TypeIoPlan[None]:
    """Copy a regular file's bytes and mode, then optionally its timestamps.

    The caller has already cleared the destination through the overwrite policy.
    A symlink sitting at the destination is removed rather than written through,
    but only once the source has been opened for reading.
    """
    yield from _step(
        io_call(
            _write_file,
            operation.path_src,
            operation.path_dst,
            if_unlink_dst_link=action is EnumOverwriteAction.PROCEED_REPLACE,
        ),
        operation,
    )
    if operation.options.preserve_timestamps:
        yield from _preserve_timestamps(operation)


def copy_directory(
    operation: SpecCopyOperation,
    action: EnumOverwriteAction,
    builder: ReportCopyBuilder,
) -> TypeIoPlan[None]:
    """Copy a directory and everything below it, one child at a time.

    An existing destination directory is merged into: children that collide by
    name go through the overwrite policy, the rest of its content is left alone.
    The first failing child aborts the walk; what was already written stays.
    """
    if action is EnumOverwriteAction.PROCEED_FRESH:
        yield from _step(io_call(os.makedirs, operation.path_dst), operation)

    l_names: list[str] = yield from _step(
        io_call(_list_entry_names, operation.path_src), operation
    )
    for _name in l_names:
        yield from _plan_copy_entry(
            operation.path_src / _name,
            operation.path_dst / _name,
            operation.options,
            builder,
        )

    # after the children, which would otherwise bump mtime again
    if operation.options.preserve_timestamps:
        yield from _preserve_timestamps(operation)


# #endregion
################################################################################
# #region Orchestrator


def _plan_copy_entry(
    src: TypePathLike,
    dst: TypePathLike,
    options: SpecCopyOptions,
    builder: ReportCopyBuilder,
    *,
    if_root: bool = False,
) -> TypeIoPlan[None]:
    if if_root:
        path_src, path_dst = yield from validate_copy_paths(src, dst)
    else:
        # children of an already validated root
        path_src, path_dst = Path(src), Path(dst)

    try:
        kind, stat_src = yield from classify_entry(path_src)
    except (FileNotFoundError, NotADirectoryError) as e:
        raise SourceNotFoundError(path_src) from e

    operation = SpecCopyOperation(
        path_src=path_src,
        path_dst=path_dst,
        kind=kind,
        options=options,
        stat_src=stat_src,
    )
    action = yield from check_destination(path_src, path_dst, kind, options)
    logger.debug(f"COPY [{kind}]:: {path_src} -> {path_dst} ({action})")

    if if_root and kind is not EnumEntryKind.DIRECTORY:
        yield from _step(
            io_call(os.makedirs, path_dst.parent, exist_ok=True), operation
        )

    match kind:
        case EnumEntryKind.SYMLINK:
            yield from copy_symlink(operation, action)
        case EnumEntryKind.FILE:
            yield from copy_file(operation, action)
        case EnumEntryKind.DIRECTORY:
            yield from copy_directory(operation, action, builder)

    builder.add_written(
        kind, if_replaced=action is EnumOverwriteAction.PROCEED_REPLACE
    )


def _plan_copy(
    src: TypePathLike, dst: TypePathLike, options: SpecCopyOptions
) -> TypeIoPlan[ReportCopy]:
    builder = ReportCopyBuilder()
    try:
        yield from _plan_copy_entry(src, dst, options, builder, if_root=True)
    except (CopyError, OSError) as e:
        logger.error(f"Fail: copy '{src}' -> '{dst}': {e}")
        raise
    report = builder.build()
    logger.debug(f"Done: copy '{src}' -> '{dst}' {report}")
    return report


def resolve_copy_options(
    options: SpecCopyOptions | Mapping[str, Any] | None,
    *,
    overwrite: bool | None = None,
    preserve_timestamps: bool | None = None,
) -> SpecCopyOptions:
    """Merge an options object with keyword overrides.

    Args:
        options: Options spec, raw mapping, or ``None`` for defaults.
        overwrite: Overrides ``options.overwrite`` when given.
        preserve_timestamps: Overrides ``options.preserve_timestamps`` when given.

    Returns:
        SpecCopyOptions: Effective options.
    """
    spec_options = SpecCopyOptions.from_raw(options)
    dict_overrides: dict[str, bool] = {}
    if overwrite is not None:
        dict_overrides["overwrite"] = overwrite
    if preserve_timestamps is not None:
        dict_overrides["preserve_timestamps"] = preserve_timestamps
    return replace(spec_options, **dict_overrides) if dict_overrides else spec_options


def copy_sync(
    src: TypePathLike,
    dst: TypePathLike,
    options: SpecCopyOptions | Mapping[str, Any] | None = None,
    *,
    overwrite: bool | None = None,
    preserve_timestamps: bool | None = None,
) -> ReportCopy:
    """Copy a file, directory or symlink, blocking until done.

    Args:
        src: Source entry. Symlinks are copied as links, never followed.
        dst: Destination path. Missing parent directories are created.
        options: Copy options as a spec or mapping.
        overwrite: Shorthand for ``options.overwrite``.
        preserve_timestamps: Shorthand for ``options.preserve_timestamps``.

    Returns:
        ReportCopy: Counts of the entries written.

    Raises:
        SamePathError: If ``src`` and ``dst`` are the same location.
        DestinationIsSubdirectoryError: If ``dst`` is inside ``src``.
        SourceNotFoundError: If ``src`` does not exist.
        AlreadyExistsError: If an entry exists at the destination without ``overwrite``.
        TypeMismatchError: If a directory would replace a non-directory or vice versa.
        UnsupportedEntryError: If a special file is encountered.
        OSError: Any I/O failure, annotated with the entry being copied.
    """
    spec_options = resolve_copy_options(
        options, overwrite=overwrite, preserve_timestamps=preserve_timestamps
    )
    return run_plan_blocking(_plan_copy(src, dst, spec_options))


async def copy(
    src: TypePathLike,
    dst: TypePathLike,
    options: SpecCopyOptions | Mapping[str, Any] | None = None,
    *,
    overwrite: bool | None = None,
    preserve_timestamps: bool | None = None,
) -> ReportCopy:
    """Suspending form of :func:`copy_sync` with identical semantics.

    Each filesystem step runs in the event loop's default executor. Cancelling
    the awaiting task stops the copy between steps and leaves whatever was
    already written in place.
    """
    spec_options = resolve_copy_options(
        options, overwrite=overwrite, preserve_timestamps=preserve_timestamps
    )
    return await run_plan_suspending(_plan_copy(src, dst, spec_options))


# #endregion
################################################################################
