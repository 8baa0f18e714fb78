"""Error taxonomy for the copy engine.

Policy violations are raised before the destination is touched. Each one also
derives from the closest builtin so callers catching ``FileExistsError`` or
``ValueError`` keep working. I/O failures from the OS layer are not wrapped: they
surface as the original ``OSError`` with a note naming the entry being copied.
"""


class CopyError(Exception):
    """Base class of every error raised by ``copykit.fs``."""


class SamePathError(CopyError, ValueError):
    def __init__(self) -> None:
        super().__init__("Source and destination cannot be the same.")


class DestinationIsSubdirectoryError(CopyError, ValueError):
    def __init__(self, src: object, dst: object) -> None:
        self.src = src
        self.dst = dst
        super().__init__(f"Cannot copy '{src}' to a subdirectory of itself, '{dst}'.")


class SourceNotFoundError(CopyError, FileNotFoundError):
    def __init__(self, src: object) -> None:
        self.src = src
        super().__init__(f"Source '{src}' does not exist.")


class AlreadyExistsError(CopyError, FileExistsError):
    def __init__(self, dst: object) -> None:
        self.dst = dst
        super().__init__(f"'{dst}' already exists.")


class TypeMismatchError(CopyError):
    def __init__(self, src: object, dst: object, *, is_src_directory: bool) -> None:
        self.src = src
        self.dst = dst
        if is_src_directory:
            msg = f"Cannot overwrite non-directory '{dst}' with directory '{src}'."
        else:
            msg = f"Cannot overwrite directory '{dst}' with non-directory '{src}'."
        super().__init__(msg)


class UnsupportedEntryError(CopyError):
    def __init__(self, path: object, mode: int) -> None:
        self.path = path
        self.mode = mode
        super().__init__(
            f"Unsupported entry type at '{path}' (mode={oct(mode)}); "
            "only files, directories and symlinks can be copied."
        )


class EnsureTypeError(CopyError):
    def __init__(self, path: object, expected: str, actual: str) -> None:
        self.path = path
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Ensure path exists, expected '{expected}', got '{actual}': '{path}'"
        )
