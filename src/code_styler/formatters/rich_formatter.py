"""Rich terminal formatter for Code Styler."""

from collections import Counter
from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..findings.models import Finding, Severity
from .base import BaseFormatter

console = Console()


def _severity_label(severity: Severity) -> str:
    if severity is Severity.ERROR:
        return "[red bold]error[/red bold]"
    return "[yellow]warning[/yellow]"


class RichFormatter(BaseFormatter):
    """Findings table grouped by source, followed by a one-line summary."""

    def __init__(self, out: Console = console):
        self.console = out

    def render(self, findings: Sequence[Finding]) -> None:
        if not findings:
            self.console.print("[green]No issues found in the changed lines.[/green]")
            return

        table = Table(title="Code Styler findings", show_lines=False)
        table.add_column("Severity", no_wrap=True)
        table.add_column("Source", style="cyan", no_wrap=True)
        table.add_column("Location", style="bold")
        table.add_column("Message")

        ordered = sorted(findings, key=lambda f: (f.source.title, f.location))
        for finding in ordered:
            table.add_row(
                _severity_label(finding.severity),
                finding.source.title,
                escape(finding.location),
                escape(finding.text),
            )
        self.console.print(table)

        counts = Counter(f.severity for f in findings)
        self.console.print(
            f"[red]{counts[Severity.ERROR]} error(s)[/red], "
            f"[yellow]{counts[Severity.WARNING]} warning(s)[/yellow]"
        )

    def format(self, findings: Sequence[Finding]) -> str:
        # Rich output goes directly to console; return empty string
        self.render(findings)
        return ""
