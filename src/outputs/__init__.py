"""Console output for verification reports."""

from outputs.console import ReportConsole

__all__ = [
    "ReportConsole",
]
