from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_DIR))

from copykit.fs import (  # noqa: E402
    AlreadyExistsError,
    DestinationIsSubdirectoryError,
    EnumEntryKind,
    EnumOverwriteAction,
    SamePathError,
    SpecCopyOptions,
    TypeMismatchError,
    UnsupportedEntryError,
    copy_sync,
)
from copykit.fs._io import run_plan_blocking  # noqa: E402
from copykit.fs.util import (  # noqa: E402
    check_destination,
    classify_entry,
    is_strict_subpath,
    normalize_path,
    validate_copy_paths,
)


def test_normalize_path_is_lexical(tmp_path: Path) -> None:
    assert normalize_path(f"{tmp_path}/a/./b/../c") == tmp_path / "a" / "c"
    assert normalize_path("rel") == Path.cwd() / "rel"


def test_is_strict_subpath() -> None:
    base = Path("/data/src")
    assert is_strict_subpath(Path("/data/src/child"), base)
    assert not is_strict_subpath(Path("/data/src"), base)
    assert not is_strict_subpath(Path("/data/src_copy"), base)
    assert not is_strict_subpath(Path("/data"), base)


def test_validate_copy_paths_returns_normalized_pair(tmp_path: Path) -> None:
    path_src, path_dst = run_plan_blocking(
        validate_copy_paths(f"{tmp_path}/x/../src", tmp_path / "dst")
    )
    assert path_src == tmp_path / "src"
    assert path_dst == tmp_path / "dst"


def test_validate_copy_paths_rejections(tmp_path: Path) -> None:
    with pytest.raises(SamePathError):
        run_plan_blocking(validate_copy_paths(tmp_path / "p", f"{tmp_path}/q/../p"))
    with pytest.raises(DestinationIsSubdirectoryError):
        run_plan_blocking(validate_copy_paths(tmp_path, tmp_path / "deep" / "er"))


def test_destination_inside_missing_source_rejected_before_classification(
    tmp_path: Path,
) -> None:
    src = tmp_path / "missing"

    with pytest.raises(DestinationIsSubdirectoryError):
        copy_sync(src, src / "child")

    assert not src.exists()


def test_classify_entry_kinds(tmp_path: Path, symlinks_supported: None) -> None:
    path_file = tmp_path / "f.txt"
    path_file.write_text("x")
    path_dir = tmp_path / "d"
    path_dir.mkdir()
    path_link_dir = tmp_path / "link_dir"
    os.symlink(path_dir, path_link_dir)
    path_link_broken = tmp_path / "link_broken"
    os.symlink(tmp_path / "nope", path_link_broken)

    def _kind(path: Path) -> EnumEntryKind:
        return run_plan_blocking(classify_entry(path))[0]

    assert _kind(path_file) is EnumEntryKind.FILE
    assert _kind(path_dir) is EnumEntryKind.DIRECTORY
    assert _kind(path_link_dir) is EnumEntryKind.SYMLINK
    assert _kind(path_link_broken) is EnumEntryKind.SYMLINK


def test_classify_missing_entry_raises_not_found(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        run_plan_blocking(classify_entry(tmp_path / "missing"))


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="mkfifo unavailable")
def test_copy_rejects_special_files(tmp_path: Path) -> None:
    path_fifo = tmp_path / "src" / "pipe"
    path_fifo.parent.mkdir()
    os.mkfifo(path_fifo)

    with pytest.raises(UnsupportedEntryError):
        run_plan_blocking(classify_entry(path_fifo))
    with pytest.raises(UnsupportedEntryError):
        copy_sync(tmp_path / "src", tmp_path / "dst")


def test_check_destination_actions(tmp_path: Path) -> None:
    src = tmp_path / "src.txt"
    dst = tmp_path / "dst.txt"
    dst_dir = tmp_path / "dst_dir"
    dst.write_text("x")
    dst_dir.mkdir()

    opts_default = SpecCopyOptions()
    opts_overwrite = SpecCopyOptions(overwrite=True)

    def _check(
        path_dst: Path, kind: EnumEntryKind, options: SpecCopyOptions
    ) -> EnumOverwriteAction:
        return run_plan_blocking(check_destination(src, path_dst, kind, options))

    assert (
        _check(tmp_path / "missing", EnumEntryKind.FILE, opts_default)
        is EnumOverwriteAction.PROCEED_FRESH
    )
    assert (
        _check(dst, EnumEntryKind.FILE, opts_overwrite)
        is EnumOverwriteAction.PROCEED_REPLACE
    )
    assert (
        _check(dst_dir, EnumEntryKind.DIRECTORY, opts_overwrite)
        is EnumOverwriteAction.PROCEED_REPLACE
    )

    with pytest.raises(AlreadyExistsError, match="already exists"):
        _check(dst, EnumEntryKind.FILE, opts_default)
    with pytest.raises(AlreadyExistsError):
        _check(dst_dir, EnumEntryKind.DIRECTORY, opts_default)
    with pytest.raises(TypeMismatchError, match="non-directory"):
        _check(dst, EnumEntryKind.DIRECTORY, opts_default)
    with pytest.raises(TypeMismatchError):
        _check(dst_dir, EnumEntryKind.SYMLINK, opts_overwrite)


def test_check_destination_treats_symlink_to_directory_as_non_directory(
    tmp_path: Path, symlinks_supported: None
) -> None:
    real_dir = tmp_path / "real"
    real_dir.mkdir()
    link = tmp_path / "link"
    os.symlink(real_dir, link)

    with pytest.raises(TypeMismatchError):
        run_plan_blocking(
            check_destination(
                tmp_path / "src",
                link,
                EnumEntryKind.DIRECTORY,
                SpecCopyOptions(overwrite=True),
            )
        )
