import os
from collections.abc import Callable, Generator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any, Self, TypeAlias, TypeVar


class EnumEntryKind(StrEnum):
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"


class EnumOverwriteAction(StrEnum):
    PROCEED_FRESH = "proceed_fresh"  # destination absent
    PROCEED_REPLACE = "proceed_replace"  # destination present, replace allowed


# camelCase names are accepted for callers porting option bags from other tooling
_DICT_OPTION_ALIASES: dict[str, str] = {
    "overwrite": "overwrite",
    "preserve_timestamps": "preserve_timestamps",
    "preserveTimestamps": "preserve_timestamps",
}


@dataclass(frozen=True, slots=True)
class SpecCopyOptions:
    """Policy switches for a copy.

    Attributes:
        overwrite: Allow replacing an existing destination entry of a compatible kind.
        preserve_timestamps: Apply the source's access/modification times to the
            destination once its content is written.
    """

    overwrite: bool = False
    preserve_timestamps: bool = False

    @classmethod
    def from_raw(cls, value: "SpecCopyOptions | Mapping[str, Any] | None") -> Self:
        """Normalize user input into a ``SpecCopyOptions``.

        Args:
            value: ``None``, an existing spec, or a mapping of option names to bools.

        Returns:
            SpecCopyOptions: The normalized options.

        Raises:
            ValueError: If a key is unknown or repeated under another spelling, or a
                value is not a bool.
        """
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        if not isinstance(value, Mapping):
            raise ValueError(
                f"Invalid copy options: {value!r}. Expected a mapping or SpecCopyOptions."
            )

        dict_kwargs: dict[str, bool] = {}
        for _key, _value in value.items():
            c_name = _DICT_OPTION_ALIASES.get(_key)
            if c_name is None:
                raise ValueError(
                    f"Unknown copy option: `{_key}`. "
                    f"Expected one of: {sorted(_DICT_OPTION_ALIASES)}"
                )
            if not isinstance(_value, bool):
                raise ValueError(
                    f"Copy option `{_key}` must be a bool, got {type(_value).__name__}."
                )
            if c_name in dict_kwargs:
                raise ValueError(
                    f"Copy option `{c_name}` is given more than once (as `{_key}`)."
                )
            dict_kwargs[c_name] = _value
        return cls(**dict_kwargs)


@dataclass(frozen=True, slots=True)
class SpecCopyOperation:
    """One unit of work: a single source entry and where it goes."""

    path_src: Path
    path_dst: Path
    kind: EnumEntryKind
    options: SpecCopyOptions
    stat_src: os.stat_result = field(repr=False)


@dataclass(frozen=True, slots=True)
class SpecIoCall:
    """A deferred filesystem primitive, executed by whichever driver runs the plan."""

    func: Callable[..., Any]
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=lambda: {})

    def __call__(self) -> Any:
        return self.func(*self.args, **self.kwargs)


# A plan yields SpecIoCall requests, receives each result back, and returns T.
T = TypeVar("T")
TypeIoPlan: TypeAlias = Generator[SpecIoCall, Any, T]

TypePathLike: TypeAlias = os.PathLike[str] | str
