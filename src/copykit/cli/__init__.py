from __future__ import annotations

from typing import TYPE_CHECKING, Any

from copykit._optional_deps import import_optional_attr

__all__ = ["main"]

if TYPE_CHECKING:
    from .app import main


def __getattr__(name: str) -> Any:
    if name == "main":
        return import_optional_attr(
            module_name=".app",
            attr_name=name,
            package=__name__,
            feature="copykit.cli",
            extras=("cli",),
            required_modules=("rich_argparse", "rich"),
        )
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
