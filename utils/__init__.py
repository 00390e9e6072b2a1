"""Shared utilities for the police budget story tools."""

# Errors
from utils.errors import (
    StoryError,
    MalformedNumberError,
    MalformedCellError,
    MissingColumnError,
    DataLoadError,
    ChartBuildError,
    UnknownStepError,
)

# Pattern definitions
from utils.patterns import EURO_SYMBOL, THOUSANDS_DOT, YEAR_VALUE, STEP_OVERRIDE

# Number parsing
from utils.strings import parse_euro, parse_percent, parse_count, parse_year

# Output formatting
from utils.formatting import (
    format_billions,
    format_percent,
    format_thousands,
    format_count,
    format_year,
)

# Validation utilities
from utils.validation import (
    ValidationIssue,
    ValidationResult,
    ValidationRegistry,
    default_registry,
    is_valid_opacity,
)

# Configuration
from utils.config import (
    Config,
    Palette,
    ChartConfig,
    ColumnMapping,
    DataSources,
    AppConfig,
)

# HTTP utilities
from utils.http import RetryStrategy, SessionManager, fetch_text, is_remote

__all__ = [
    # Errors
    "StoryError",
    "MalformedNumberError",
    "MalformedCellError",
    "MissingColumnError",
    "DataLoadError",
    "ChartBuildError",
    "UnknownStepError",
    # Patterns
    "EURO_SYMBOL",
    "THOUSANDS_DOT",
    "YEAR_VALUE",
    "STEP_OVERRIDE",
    # Parsing
    "parse_euro",
    "parse_percent",
    "parse_count",
    "parse_year",
    # Formatting
    "format_billions",
    "format_percent",
    "format_thousands",
    "format_count",
    "format_year",
    # Validation
    "ValidationIssue",
    "ValidationResult",
    "ValidationRegistry",
    "default_registry",
    "is_valid_opacity",
    # Config
    "Config",
    "Palette",
    "ChartConfig",
    "ColumnMapping",
    "DataSources",
    "AppConfig",
    # HTTP
    "RetryStrategy",
    "SessionManager",
    "fetch_text",
    "is_remote",
]
