from dataclasses import dataclass
from typing import ClassVar

from .spec import EnumEntryKind


@dataclass(frozen=True, slots=True)
class ReportCopy:
    """
    Summary of a successful copy.

    A copy either completes or raises, so the report only exists for runs in which
    every entry was written. It records how many entries of each kind were written
    and how many of them replaced something already at the destination.

    Attributes:
        cnt_files:
            Regular files written.
        cnt_dirs:
            Directories created or merged into (the root directory included).
        cnt_symlinks:
            Symbolic links recreated.
        cnt_replaced:
            Entries that already existed at the destination and were replaced
            or merged into under ``overwrite``.
    """

    cnt_files: int = 0
    cnt_dirs: int = 0
    cnt_symlinks: int = 0
    cnt_replaced: int = 0

    @property
    def calculate_entry_count(self) -> int:
        return self.cnt_files + self.cnt_dirs + self.cnt_symlinks

    def to_dict(self) -> dict[str, int]:
        return {
            "cnt_files": self.cnt_files,
            "cnt_dirs": self.cnt_dirs,
            "cnt_symlinks": self.cnt_symlinks,
            "cnt_replaced": self.cnt_replaced,
            "cnt_entries": self.calculate_entry_count,
        }

    def format(self, *, prefix: str = "[COPY]") -> str:
        s = self.to_dict()
        return (
            f"{prefix} entries={s['cnt_entries']} "
            f"files={s['cnt_files']} dirs={s['cnt_dirs']} "
            f"symlinks={s['cnt_symlinks']} replaced={s['cnt_replaced']}"
        )

    def __str__(self) -> str:
        return self.format()


@dataclass(slots=True)
class ReportCopyBuilder:
    """Mutable accumulator for copy statistics."""

    DICT_KIND_FIELDS: ClassVar[dict[EnumEntryKind, str]] = {
        EnumEntryKind.FILE: "cnt_files",
        EnumEntryKind.DIRECTORY: "cnt_dirs",
        EnumEntryKind.SYMLINK: "cnt_symlinks",
    }

    cnt_files: int = 0
    cnt_dirs: int = 0
    cnt_symlinks: int = 0
    cnt_replaced: int = 0

    def add_written(self, kind: EnumEntryKind, *, if_replaced: bool = False) -> None:
        c_field = self.DICT_KIND_FIELDS[kind]
        setattr(self, c_field, getattr(self, c_field) + 1)
        if if_replaced:
            self.cnt_replaced += 1

    def build(self) -> ReportCopy:
        return ReportCopy(
            cnt_files=self.cnt_files,
            cnt_dirs=self.cnt_dirs,
            cnt_symlinks=self.cnt_symlinks,
            cnt_replaced=self.cnt_replaced,
        )
