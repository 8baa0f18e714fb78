from __future__ import annotations

import asyncio
import os
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

# Ensure src-layout imports work when running tests from repo checkout.
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
sys.path.insert(0, str(SRC_DIR))

from copykit.fs import ReportCopy, copy, copy_sync  # noqa: E402


@pytest.fixture(params=["sync", "async"])
def run_copy(request: pytest.FixtureRequest) -> Callable[..., ReportCopy]:
    """``copy_sync`` or a blocking wrapper around the suspending ``copy``."""
    if request.param == "sync":
        return copy_sync

    def _run(*args: Any, **kwargs: Any) -> ReportCopy:
        return asyncio.run(copy(*args, **kwargs))

    return _run


@pytest.fixture
def symlinks_supported(tmp_path: Path) -> None:
    path_link = tmp_path / ".symlink_check"
    try:
        os.symlink(tmp_path, path_link)
    except (OSError, NotImplementedError) as e:
        pytest.skip(f"symlink not supported: {e}")
    os.unlink(path_link)
