from __future__ import annotations

import os
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_DIR))

from copykit.fs import (  # noqa: E402
    AlreadyExistsError,
    ReportCopy,
    TypeMismatchError,
    ensure_symlink_sync,
)

pytestmark = pytest.mark.usefixtures("symlinks_supported")


def _write_text(path: Path, text: str = "x") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)


def test_copy_symlink_file(tmp_path: Path, run_copy: Callable[..., ReportCopy]) -> None:
    target = tmp_path / "copy_dir_link_file" / "target.txt"
    src = tmp_path / "copy_dir_link_file" / "0.txt"
    dst = tmp_path / "0_copy.txt"
    _write_text(target, "txt")
    os.symlink(target, src)

    report = run_copy(src, dst)

    assert dst.is_symlink()
    assert os.readlink(dst) == os.readlink(src)
    assert report.cnt_symlinks == 1
    assert report.cnt_files == 0


def test_copy_symlink_directory_is_not_followed(
    tmp_path: Path, run_copy: Callable[..., ReportCopy]
) -> None:
    origin = tmp_path / "copy_dir"
    _write_text(origin / "0.txt", "0")
    src = tmp_path / "copy_dir_link"
    dst = tmp_path / "copy_dir_link_copy"
    ensure_symlink_sync(origin, src)

    run_copy(src, dst)

    assert dst.is_symlink()
    assert os.readlink(dst) == str(origin)
    # listing goes through the link to the one real directory
    assert (dst / "0.txt").read_text() == "0"


def test_copy_dangling_symlink_stays_dangling(
    tmp_path: Path, run_copy: Callable[..., ReportCopy]
) -> None:
    src = tmp_path / "broken"
    dst = tmp_path / "broken_copy"
    os.symlink(tmp_path / "missing.txt", src)

    run_copy(src, dst)

    assert dst.is_symlink()
    assert not dst.exists()
    assert os.readlink(dst) == str(tmp_path / "missing.txt")


def test_copy_symlink_keeps_relative_target_verbatim(
    tmp_path: Path, run_copy: Callable[..., ReportCopy]
) -> None:
    _write_text(tmp_path / "a" / "target.txt", "txt")
    src = tmp_path / "a" / "rel_link"
    dst = tmp_path / "b" / "rel_link"
    os.symlink("target.txt", src)

    run_copy(src, dst)

    assert os.readlink(dst) == "target.txt"
    # relative to its new home, so it dangles there
    assert not dst.exists()


def test_copy_symlink_over_existing_entry(
    tmp_path: Path, run_copy: Callable[..., ReportCopy]
) -> None:
    src = tmp_path / "link"
    dst = tmp_path / "link_copy"
    os.symlink("new_target", src)
    os.symlink("old_target", dst)

    with pytest.raises(AlreadyExistsError):
        run_copy(src, dst)
    assert os.readlink(dst) == "old_target"

    report = run_copy(src, dst, overwrite=True)

    assert os.readlink(dst) == "new_target"
    assert report.cnt_replaced == 1


def test_copy_symlink_replaces_regular_file_with_overwrite(
    tmp_path: Path, run_copy: Callable[..., ReportCopy]
) -> None:
    src = tmp_path / "link"
    dst = tmp_path / "plain.txt"
    os.symlink("target", src)
    _write_text(dst, "plain")

    run_copy(src, dst, overwrite=True)

    assert dst.is_symlink()
    assert os.readlink(dst) == "target"


def test_copy_symlink_onto_directory_is_type_mismatch(
    tmp_path: Path, run_copy: Callable[..., ReportCopy]
) -> None:
    src = tmp_path / "link"
    dst = tmp_path / "dir"
    os.symlink("target", src)
    dst.mkdir()

    with pytest.raises(TypeMismatchError):
        run_copy(src, dst, overwrite=True)

    assert dst.is_dir() and not dst.is_symlink()


@pytest.mark.skipif(
    os.utime not in os.supports_follow_symlinks,
    reason="lutimes unsupported on this platform",
)
def test_copy_symlink_preserves_its_own_timestamps(
    tmp_path: Path, run_copy: Callable[..., ReportCopy]
) -> None:
    n_time_ns = 1_400_000_000 * 10**9
    target = tmp_path / "target.txt"
    src = tmp_path / "link"
    dst = tmp_path / "link_copy"
    _write_text(target, "txt")
    os.symlink(target, src)
    os.utime(src, ns=(n_time_ns, n_time_ns), follow_symlinks=False)
    n_target_mtime = os.stat(target).st_mtime_ns

    run_copy(src, dst, preserve_timestamps=True)

    assert os.lstat(dst).st_mtime_ns == n_time_ns
    assert os.stat(target).st_mtime_ns == n_target_mtime
