from dataclasses import dataclass

from rich.console import Console
from rich.style import Style
from rich.table import Table

from copykit.fs import ReportCopy


@dataclass(frozen=True, slots=True)
class SpecCliTheme:
    h1: str = "#7C3AED"
    h2: str = "#00FFFF"
    error: str = "bold red"


class CliHeadings:
    def __init__(
        self, *, console: Console | None = None, theme: SpecCliTheme | None = None
    ):
        self.console = console or Console()
        self.theme = theme or SpecCliTheme()

    def h1(self, text: str) -> None:
        self.console.rule(
            f"[bold]{text}[/bold]",
            style=Style(color=self.theme.h1, bold=True),
            characters="=",
        )

    def h2(self, text: str) -> None:
        self.console.rule(text, style=Style(color=self.theme.h2), characters="─")

    def error(self, text: str) -> None:
        self.console.print(
            text, style=self.theme.error, markup=False, soft_wrap=True
        )


def render_report(report: ReportCopy) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Entries")
    table.add_column("Count", justify="right")
    table.add_row("files", str(report.cnt_files))
    table.add_row("directories", str(report.cnt_dirs))
    table.add_row("symlinks", str(report.cnt_symlinks))
    table.add_row("replaced", str(report.cnt_replaced))
    table.add_section()
    table.add_row("total", str(report.calculate_entry_count))
    return table
