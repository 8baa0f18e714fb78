from __future__ import annotations

from collections.abc import Sequence
from importlib import import_module
from typing import Any


def build_optional_dependency_error(
    *,
    feature: str,
    extras: Sequence[str],
    missing_module: str | None,
) -> ModuleNotFoundError:
    extras_text = ",".join(dict.fromkeys(extras))
    missing_text = (
        f"Missing optional dependency `{missing_module}`."
        if missing_module
        else "Missing optional dependency."
    )
    return ModuleNotFoundError(
        f"{feature} is unavailable. {missing_text} "
        f"Install extras with `pip install \"copykit[{extras_text}]\"` "
        f"or sync in development with `pdm sync -G dev -G {extras_text}`."
    )


def _is_required_missing(missing: str | None, required_modules: Sequence[str]) -> bool:
    if not required_modules:
        return True
    set_missing = set((missing or "").split("."))
    set_required = {part for item in required_modules for part in item.split(".")}
    return bool(set_missing & set_required)


def import_optional_attr(
    *,
    module_name: str,
    attr_name: str,
    package: str,
    feature: str,
    extras: Sequence[str],
    required_modules: Sequence[str],
) -> Any:
    """Import ``attr_name`` from a module that needs an optional extra.

    Raises:
        ModuleNotFoundError: With an install hint, if one of ``required_modules``
            is missing. Unrelated import failures propagate unchanged.
    """
    try:
        module = import_module(module_name, package=package)
    except ModuleNotFoundError as exc:
        if _is_required_missing(exc.name, required_modules):
            raise build_optional_dependency_error(
                feature=feature,
                extras=extras,
                missing_module=exc.name,
            ) from exc
        raise
    return getattr(module, attr_name)
