"""Output formatters for reports and engine status."""

from .formatters import JSONFormatter, OutputFormatter, TableFormatter, get_formatter

__all__ = ["JSONFormatter", "OutputFormatter", "TableFormatter", "get_formatter"]
