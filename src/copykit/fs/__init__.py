from .engine import copy, copy_sync
from .ensure import (
    ensure_dir,
    ensure_dir_sync,
    ensure_file,
    ensure_file_sync,
    ensure_symlink,
    ensure_symlink_sync,
    exists,
    exists_sync,
)
from .errors import (
    AlreadyExistsError,
    CopyError,
    DestinationIsSubdirectoryError,
    EnsureTypeError,
    SamePathError,
    SourceNotFoundError,
    TypeMismatchError,
    UnsupportedEntryError,
)
from .report import ReportCopy
from .spec import EnumEntryKind, EnumOverwriteAction, SpecCopyOptions

__all__ = [
    "copy",
    "copy_sync",
    "ensure_dir",
    "ensure_dir_sync",
    "ensure_file",
    "ensure_file_sync",
    "ensure_symlink",
    "ensure_symlink_sync",
    "exists",
    "exists_sync",
    "AlreadyExistsError",
    "CopyError",
    "DestinationIsSubdirectoryError",
    "EnsureTypeError",
    "SamePathError",
    "SourceNotFoundError",
    "TypeMismatchError",
    "UnsupportedEntryError",
    "ReportCopy",
    "EnumEntryKind",
    "EnumOverwriteAction",
    "SpecCopyOptions",
]
