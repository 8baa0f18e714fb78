"""Argument parser for the ``copykit`` command."""

import argparse
from enum import StrEnum
from pathlib import Path

from rich_argparse import ArgumentDefaultsRichHelpFormatter, RawTextRichHelpFormatter

from copykit import __version__


class SmartFormatter(ArgumentDefaultsRichHelpFormatter, RawTextRichHelpFormatter):
    """
    Keep manual newlines/indentation AND show (default: ...) in help.
    """

    pass


class EnumGroupKey(StrEnum):
    INPUTS = "inputs"
    RULES = "rules"
    GENERAL = "general"


DICT_ARG_GROUP_META = {
    EnumGroupKey.INPUTS: ("Inputs", "Source and destination entries."),
    EnumGroupKey.RULES: ("Rules", "Overwrite and timestamp policy."),
    EnumGroupKey.GENERAL: ("General", "Logging and output settings."),
}

TUPLE_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR")


def build_parser(prog: str = "copykit") -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog,
        description=(
            "Copy a file, directory or symlink.\n"
            "Symlinks are recreated with the same raw target, never followed."
        ),
        formatter_class=SmartFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    dict_groups = {
        _key: parser.add_argument_group(_title, description=_desc)
        for _key, (_title, _desc) in DICT_ARG_GROUP_META.items()
    }

    g = dict_groups[EnumGroupKey.INPUTS]
    g.add_argument("src", type=Path, help="Source entry.")
    g.add_argument("dst", type=Path, help="Destination path.")

    g = dict_groups[EnumGroupKey.RULES]
    g.add_argument(
        "--overwrite",
        action="store_true",
        help="Replace existing destination entries of a compatible kind.",
    )
    g.add_argument(
        "--preserve-timestamps",
        dest="preserve_timestamps",
        action="store_true",
        help="Keep access/modification times of the source entries.",
    )

    g = dict_groups[EnumGroupKey.GENERAL]
    g.add_argument(
        "--log-level",
        dest="log_level",
        type=str.upper,
        choices=TUPLE_LOG_LEVELS,
        default="WARNING",
        help="Minimum level written to stderr.",
    )
    g.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Do not print the summary table.",
    )
    return parser
