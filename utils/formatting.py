"""Output formatting utilities for chart labels and axis ticks.

Provides reusable functions for:
- Budget amounts in miljard (billions) of euros
- Percentages and counts
- Year tick labels
"""

from typing import Optional


def format_billions(value: Optional[float], precision: int = 1) -> str:
    """Format a budget amount (millions of euros) as miljard.

    Args:
        value: Amount in millions of euros
        precision: Decimal places (default: 1)

    Returns:
        Formatted string like "€5.1mrd"

    Examples:
        format_billions(5123.4) -> "€5.1mrd"
        format_billions(None) -> "-"
    """
    if value is None:
        return "-"
    return f"€{value / 1000:.{precision}f}mrd"


def format_percent(value: Optional[float], precision: int = 1) -> str:
    """Format a percentage for display.

    Examples:
        format_percent(23.44) -> "23.4%"
        format_percent(25, precision=0) -> "25%"
        format_percent(None) -> "-"
    """
    if value is None:
        return "-"
    return f"{value:.{precision}f}%"


def format_thousands(value: Optional[float]) -> str:
    """Format a count in thousands with a "k" suffix.

    Examples:
        format_thousands(812345) -> "812k"
        format_thousands(0) -> "0k"
    """
    if value is None:
        return "-"
    return f"{value / 1000:.0f}k"


def format_count(value: Optional[int]) -> str:
    """Format a count with a thousands separator.

    Examples:
        format_count(1234567) -> "1,234,567"
        format_count(None) -> "-"
    """
    if value is None:
        return "-"
    return f"{value:,d}"


def format_year(value: float) -> str:
    """Format a year tick the way a "d" format does (integer, no separator)."""
    return f"{value:.0f}"
