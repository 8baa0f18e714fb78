from collections.abc import Sequence

from loguru import logger
from rich.console import Console

from copykit.fs import CopyError, SpecCopyOptions, copy_sync

from .console import CliHeadings, render_report
from .log import configure_logging
from .parser import build_parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    configure_logging(ns.log_level)

    spec_options = SpecCopyOptions(
        overwrite=ns.overwrite,
        preserve_timestamps=ns.preserve_timestamps,
    )
    heads_out = CliHeadings()
    heads_err = CliHeadings(console=Console(stderr=True))

    try:
        report = copy_sync(ns.src, ns.dst, spec_options)
    except (CopyError, OSError) as e:
        heads_err.error(f"copykit: {e}")
        return 1

    logger.success(f"Done: {ns.src} -> {ns.dst}")
    if not ns.quiet:
        heads_out.h1("copykit")
        heads_out.h2(f"{ns.src} -> {ns.dst}")
        heads_out.console.print(render_report(report))
    return 0
