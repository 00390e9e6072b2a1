"""Locale-aware number parsing for the story datasets.

The CSV exports use Dutch formatting: a euro sign, dots as thousands
separators and a comma as the decimal mark ("€5.123,4"). Percentages use the
same decimal comma ("12,3"). Crime counts are plain integers.

Each parser returns None for a missing or empty cell and raises
MalformedNumberError for text it cannot read; deciding what a malformed cell
means for the row is left to the caller (see pipeline.transform).
"""

from typing import Optional

from utils.errors import MalformedNumberError
from utils.patterns import (
    CELL_WHITESPACE,
    DECIMAL_NUMBER,
    EURO_SYMBOL,
    INTEGER_NUMBER,
    THOUSANDS_DOT,
    YEAR_VALUE,
)


def _is_blank(text: Optional[str]) -> bool:
    return text is None or not str(text).strip()


def parse_euro(text: Optional[str]) -> Optional[float]:
    """Parse a Dutch euro amount.

    Strips the currency symbol and the thousands dots, turns the decimal comma
    into a point and parses the result as a float.

    Examples:
        parse_euro("€5.123,4") -> 5123.4
        parse_euro("€ 7.980") -> 7980.0
        parse_euro("") -> None

    Raises:
        MalformedNumberError: If the text is not a number after cleanup.
    """
    if _is_blank(text):
        return None
    s = CELL_WHITESPACE.sub('', str(text))
    s = EURO_SYMBOL.sub('', s)
    s = THOUSANDS_DOT.sub('', s)
    s = s.replace(',', '.', 1)
    if not DECIMAL_NUMBER.match(s):
        raise MalformedNumberError(str(text), "euro")
    return float(s)


def parse_percent(text: Optional[str]) -> Optional[float]:
    """Parse a percentage written with a decimal comma.

    Examples:
        parse_percent("12,3") -> 12.3
        parse_percent("25") -> 25.0
        parse_percent(None) -> None
    """
    if _is_blank(text):
        return None
    s = CELL_WHITESPACE.sub('', str(text)).rstrip('%')
    s = s.replace(',', '.', 1)
    if not DECIMAL_NUMBER.match(s):
        raise MalformedNumberError(str(text), "percent")
    return float(s)


def parse_count(text: Optional[str]) -> Optional[int]:
    """Parse a locale-neutral integer count such as "812345"."""
    if _is_blank(text):
        return None
    s = CELL_WHITESPACE.sub('', str(text))
    if not INTEGER_NUMBER.match(s):
        raise MalformedNumberError(str(text), "count")
    return int(s)


def parse_year(text: Optional[str]) -> int:
    """Parse a year cell; provisional markers ("2024*") are accepted.

    Unlike the value parsers a year is never optional, so a blank cell raises.
    """
    s = CELL_WHITESPACE.sub('', str(text or ''))
    m = YEAR_VALUE.match(s)
    if not m:
        raise MalformedNumberError(str(text), "year")
    return int(m.group(1))
