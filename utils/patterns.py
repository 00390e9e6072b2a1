"""Pre-compiled regex patterns for the story data tools.

All patterns are compiled once at module import. The number parsers run for
every cell of every dataset, so the patterns are shared rather than built
inline.

Usage:
    from utils.patterns import EURO_SYMBOL, THOUSANDS_DOT

    cleaned = THOUSANDS_DOT.sub('', EURO_SYMBOL.sub('', text))
"""

import re

# Currency symbol in budget cells: "€5.123,4"
EURO_SYMBOL = re.compile(r'€')

# Dutch thousands separator (every dot in a euro amount)
THOUSANDS_DOT = re.compile(r'\.')

# Whitespace inside numeric cells, including non-breaking spaces from exports
CELL_WHITESPACE = re.compile(r'[\s ]+')

# Plain signed decimal after normalisation: "5123.4", "-0.5", "12"
DECIMAL_NUMBER = re.compile(r'^[+-]?(\d+(\.\d*)?|\.\d+)$')

# Locale-neutral integer count: "812345"
INTEGER_NUMBER = re.compile(r'^[+-]?\d+$')

# Year column values: "2015", "2015*" (CBS marks provisional years with *)
YEAR_VALUE = re.compile(r'^(\d{4})\*?$')

# Step override on the CLI / query string: "budget=3"
STEP_OVERRIDE = re.compile(r'^(?P<chart>[a-z]+)=(?P<step>\d+)$')
