"""Output formatters for beneficiary reports and engine status.

Provides two output formats:
- JSON: Machine-readable, complete data
- Table: Human-readable CLI output (rich)
"""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from io import StringIO

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..core.models import BeneficiaryReport, CollectorAccount, GlobalTotals
from ..core.types import AccountStatus, OutputFormatType, Timestamp

logger = logging.getLogger(__name__)


def _format_timestamp(ts: Timestamp) -> str:
    if not ts:
        return "-"
    return datetime.fromtimestamp(ts, tz=timezone.utc).strftime("%Y-%m-%d %H:%M UTC")


class OutputFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def format_reports(self, reports: list[BeneficiaryReport]) -> str:
        """Format one or more beneficiary reports."""
        pass

    @abstractmethod
    def format_status(self, totals: GlobalTotals, collectors: list[CollectorAccount]) -> str:
        """Format the global totals and collector tallies."""
        pass

    def format_to_file(self, reports: list[BeneficiaryReport], filepath: str) -> None:
        """Write formatted reports to a file."""
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(self.format_reports(reports))


class JSONFormatter(OutputFormatter):
    """Formats results as JSON."""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def format_reports(self, reports: list[BeneficiaryReport]) -> str:
        data = [r.model_dump(mode="json") for r in reports]
        return json.dumps(data, indent=self.indent)

    def format_status(self, totals: GlobalTotals, collectors: list[CollectorAccount]) -> str:
        data = totals.model_dump(mode="json")
        data["uncollected_fee"] = totals.uncollected_fee
        data["collectors"] = [c.model_dump(mode="json") for c in collectors]
        return json.dumps(data, indent=self.indent)


class TableFormatter(OutputFormatter):
    """Formats results as human-readable tables for CLI output."""

    def __init__(self, width: int = 100, color: bool = True):
        """
        Initialize table formatter.

        Args:
            width: Maximum table width
            color: Emit ANSI colour codes
        """
        self.width = width
        self.color = color

    def _console(self, output: StringIO) -> Console:
        return Console(file=output, force_terminal=self.color, width=self.width)

    def format_reports(self, reports: list[BeneficiaryReport]) -> str:
        output = StringIO()
        console = self._console(output)

        for report in reports:
            status_style = "green" if report.status == AccountStatus.ACTIVE else "red"
            console.print(Panel(
                f"[bold cyan]{report.beneficiary}[/] "
                f"[{status_style}]{report.status.value}[/]\n"
                f"[dim]As of {_format_timestamp(report.timestamp)}[/]",
                title="Beneficiary",
                expand=False,
            ))

            table = Table(show_header=False)
            table.add_column("Field", style="cyan")
            table.add_column("Value", style="green", justify="right")
            table.add_row("Total Allocation", f"{report.total_allocation:,}")
            table.add_row("Total Unlocked", f"{report.total_unlocked:,}")
            table.add_row("Total Claimed", f"{report.total_claimed:,}")
            table.add_row("Fee", f"{report.total_fee:,}")
            table.add_row("Burned", f"{report.total_burned:,}")
            table.add_row("Still Vesting", f"{report.still_vesting:,}")
            table.add_row("Locked (net)", f"{report.locked:,}")
            table.add_row("Min Claimable", f"{report.min_claimable:,}")
            table.add_row("Max Claimable", f"{report.max_claimable:,}")
            table.add_row("Upcoming", f"{report.upcoming_claimable:,}")
            table.add_row("Next Unlock", _format_timestamp(report.next_unlock_time))
            console.print(table)

        return output.getvalue()

    def format_status(self, totals: GlobalTotals, collectors: list[CollectorAccount]) -> str:
        output = StringIO()
        console = self._console(output)

        totals_table = Table(title="Global Totals", show_header=False)
        totals_table.add_column("Metric", style="cyan")
        totals_table.add_column("Value", style="green", justify="right")
        totals_table.add_row("Allocated", f"{totals.total_allocated:,}")
        totals_table.add_row("Claimed", f"{totals.total_claimed:,}")
        totals_table.add_row("Fee", f"{totals.total_fee:,}")
        totals_table.add_row("Fee Collected", f"{totals.total_fee_collected:,}")
        totals_table.add_row("Fee Uncollected", f"{totals.uncollected_fee:,}")
        totals_table.add_row("Burned", f"{totals.total_burned:,}")
        totals_table.add_row("Whitelisting", "open" if totals.whitelisting_open else "closed")
        console.print(totals_table)

        collector_table = Table(title="Fee Collectors")
        collector_table.add_column("Identity", style="cyan")
        collector_table.add_column("Collected", justify="right")
        collector_table.add_column("Active")
        for collector in collectors:
            collector_table.add_row(
                collector.identity,
                f"{collector.total_collected:,}",
                "[green]yes[/]" if collector.is_active else "[dim]no[/]",
            )
        console.print(collector_table)

        return output.getvalue()


def get_formatter(output: OutputFormatType | str) -> OutputFormatter:
    """Return the formatter for an output format name."""
    if output.lower() == "json":
        return JSONFormatter()
    return TableFormatter()
