"""
Console output for the verification CLIs.

Wraps rich so probe results are printed with consistent color-coded
markers. All report output goes to standard output; diagnostic logging
stays on standard error.
"""

from typing import Optional

from rich.console import Console as RichConsole
from rich.markup import escape

from core.models import ProbeResult, ProbeStatus, RunReport

STATUS_MARKERS = {
    ProbeStatus.PASS: ("green", "✅ PASS:"),
    ProbeStatus.FAIL: ("red", "❌ FAIL:"),
    ProbeStatus.WARN: ("yellow", "⚠️  WARNING:"),
    ProbeStatus.INFO: ("cyan", "ℹ️ "),
}


class ReportConsole:
    """
    Report printer wrapping rich.

    Respects TTY detection unless force_terminal is given; pass
    no_color=True for plain output in CI logs.
    """

    def __init__(
        self,
        *,
        force_terminal: Optional[bool] = None,
        no_color: bool = False,
        console: Optional[RichConsole] = None,
    ) -> None:
        self._console = console or RichConsole(
            force_terminal=force_terminal,
            no_color=no_color,
            highlight=False,
            stderr=False,
        )

    def header(self, title: str, char: str = "=", width: int = 42) -> None:
        """Print a title followed by a separator line."""
        self._console.print(f"[bold]{escape(title)}[/bold]")
        self._console.print(char * width)

    def section(self, title: str) -> None:
        """Print a probe section heading."""
        self._console.print(escape(title))

    def blank(self) -> None:
        self._console.print()

    def line(self, message: str, style: Optional[str] = None) -> None:
        """Print a plain line, optionally styled."""
        text = escape(message)
        if style:
            text = f"[{style}]{text}[/{style}]"
        self._console.print(text)

    def result(self, result: ProbeResult) -> None:
        """Print one probe result with its marker and detail lines."""
        color, marker = STATUS_MARKERS[result.status]
        self._console.print(f"[{color}]{marker} {escape(result.message)}[/{color}]")
        for detail in result.details:
            self._console.print(f"   {escape(detail)}", style="dim")

    def summary(self, report: RunReport, success: str, failure: str) -> None:
        """Print the closing verdict line for a report."""
        self.blank()
        if report.has_failures:
            self._console.print(f"[bold red]⚠️  {escape(failure)}[/bold red]")
        else:
            self._console.print(f"[bold green]\U0001f389 {escape(success)}[/bold green]")

    def counts(self, report: RunReport) -> None:
        """Print pass/fail/warn totals."""
        self._console.print(
            f"[green]{report.count(ProbeStatus.PASS)} passed[/green], "
            f"[red]{report.count(ProbeStatus.FAIL)} failed[/red], "
            f"[yellow]{report.count(ProbeStatus.WARN)} warnings[/yellow]"
        )


__all__ = [
    "ReportConsole",
]
