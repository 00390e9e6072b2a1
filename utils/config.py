"""Configuration management utilities for the story tools.

Provides:
- A Config base class with dict round-tripping
- The brand palette handed to every chart builder
- Chart surface dimensions and transition timings
- Dataset locations and CSV column mappings
- Application settings read from the environment
"""

from pathlib import Path
from typing import Dict, List, Optional, Any, Tuple
import os


class Config:
    """Base configuration class for organizing application settings."""

    def __init__(self):
        """Initialize configuration with default values."""
        pass

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary.

        Returns:
            Dictionary of all public config attributes
        """
        return {k: v for k, v in self.__dict__.items() if not k.startswith("_")}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create config from dictionary.

        Keys that are not attributes of the default instance are ignored so a
        stale settings dict cannot inject unknown attributes.

        Args:
            data: Configuration dictionary

        Returns:
            Config instance with values from dictionary
        """
        config = cls()
        known = config.to_dict()
        for key, value in data.items():
            if known and key not in known:
                continue
            setattr(config, key, value)
        return config


class Palette(Config):
    """Follow the Money brand colours (brand manual V1, December 2024)."""

    def __init__(self):
        super().__init__()
        self.primary = "#FF5725"      # FTM rood
        self.secondary = "#706F5F"    # dollargroen
        self.tertiary = "#A49B93"     # zilver
        self.accent = "#B48559"       # goud
        self.dark = "#000000"         # zwart
        self.offwhite = "#F5F1ED"
        self.duifgrijs = "#204951"
        self.bruinrood = "#B43C09"
        self.blauw = "#0068AF"


class ChartConfig(Config):
    """Drawing surface and styling shared by the three chart builders.

    width/height are the outer SVG size; the plot area is what remains after
    the margins.
    """

    def __init__(self):
        super().__init__()
        self.width = 900
        self.height = 500
        self.margin = {"top": 40, "right": 120, "bottom": 60, "left": 80}
        self.stroke_width = 3
        self.tick_count = 10
        self.legend_spacing = 25
        self.label_offset = 5
        self.reset_duration_ms = 800
        self.reveal_duration_ms = 1000
        self.step_duration_ms = 800

    @property
    def inner_width(self) -> float:
        return max(0, self.width - self.margin["left"] - self.margin["right"])

    @property
    def inner_height(self) -> float:
        return max(0, self.height - self.margin["top"] - self.margin["bottom"])


class ColumnMapping:
    """Maps logical record fields to the CSV headers that may carry them.

    The first header listed is the one used by the published exports; the
    rest are accepted aliases.
    """

    BUDGET_COLUMNS: Dict[str, Tuple[str, ...]] = {
        "year": ("Jaar", "Year"),
        "budgeted": ("Begroting", "Budgeted"),
        "actual": ("Realisatie", "Actual"),
        "inflation_adjusted": ("Inflatie * Begroting2015", "InflationAdjusted"),
    }

    CRIME_COLUMNS: Dict[str, Tuple[str, ...]] = {
        "year": ("Perioden", "Year"),
        "total": ("Totaal", "Total"),
        "violent": ("Geweldsmisdrijven", "Violent"),
        "property": ("Vermogensmisdrijven", "Property"),
        "vandalism": ("Vernielingen", "Vandalism"),
    }

    CLEARANCE_COLUMNS: Dict[str, Tuple[str, ...]] = {
        "year": ("Perioden", "Year"),
        "total": ("Totaal", "Total"),
        "property": ("Vermogens-", "Property"),
        "violent": ("Gewelds-", "Violent"),
    }

    @classmethod
    def get_mapping(cls, dataset: str) -> Dict[str, Tuple[str, ...]]:
        """Get the column mapping for a dataset name.

        Raises:
            KeyError: If the dataset is unknown
        """
        mappings = {
            "budget": cls.BUDGET_COLUMNS,
            "crime": cls.CRIME_COLUMNS,
            "clearance": cls.CLEARANCE_COLUMNS,
        }
        return mappings[dataset]

    @classmethod
    def normalize_header(cls, header: Optional[str]) -> str:
        """Normalize a header for comparison (strip BOM/whitespace, lowercase)."""
        if not header:
            return ""
        return " ".join(str(header).replace("\ufeff", "").split()).lower()

    @classmethod
    def resolve(cls, dataset: str, headers: List[str]) -> Dict[str, Optional[str]]:
        """Find the actual header for every field of a dataset.

        Returns:
            Dict of field name -> header present in the file, or None if no
            accepted header was found
        """
        by_norm = {cls.normalize_header(h): h for h in headers if h is not None}
        resolved: Dict[str, Optional[str]] = {}
        for field, accepted in cls.get_mapping(dataset).items():
            resolved[field] = next(
                (by_norm[cls.normalize_header(a)] for a in accepted
                 if cls.normalize_header(a) in by_norm),
                None,
            )
        return resolved


class DataSources(Config):
    """Where the three CSV datasets live.

    ``base_url`` wins over ``data_dir`` when set, so the same build can read a
    local checkout or the published files.
    """

    def __init__(self):
        super().__init__()
        self.data_dir = Path("data")
        self.base_url: Optional[str] = None
        self.files = {
            "budget": "Begroting.csv",
            "crime": "Misdrijven.csv",
            "clearance": "Ophelderingspercentage.csv",
        }
        self.delimiter = ","
        self.encoding = "utf-8-sig"
        self.timeout_seconds = 30
        self.max_retries = 3
        self.backoff_factor = 0.5

    def location(self, dataset: str) -> str:
        """Return the path or URL for a dataset."""
        name = self.files[dataset]
        if self.base_url:
            return self.base_url.rstrip("/") + "/" + name
        return str(Path(self.data_dir) / name)


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class AppConfig(Config):
    """Application-level configuration loaded from environment variables.

    All env vars have sensible defaults so the preview server and the export
    CLI work out of the box.

    Environment variables:
        STORY_DATA_DIR: Directory holding the three CSV files (default: data)
        STORY_DATA_URL: Base URL to fetch the CSV files from instead
        STORY_STRICT_PARSE: Treat malformed cells as errors (default: 0)
        STORY_CHART_WIDTH: Outer chart width in pixels (default: 900)
        STORY_CHART_HEIGHT: Outer chart height in pixels (default: 500)
        APP_PORT: Preview server port (default: 8000)
        APP_HOST: Preview server bind address (default: 127.0.0.1)
        APP_LOG_FORMAT: Logging format, "text" or "json" (default: text)
    """

    def __init__(self) -> None:
        super().__init__()
        self.data_dir = Path(os.getenv("STORY_DATA_DIR", "data"))
        self.data_url: Optional[str] = os.getenv("STORY_DATA_URL") or None
        self.strict_parse = _env_flag("STORY_STRICT_PARSE")
        self.chart_width = int(os.getenv("STORY_CHART_WIDTH", "900"))
        self.chart_height = int(os.getenv("STORY_CHART_HEIGHT", "500"))
        self.api_port = int(os.getenv("APP_PORT", "8000"))
        self.api_host = os.getenv("APP_HOST", "127.0.0.1")
        self.log_format = os.getenv("APP_LOG_FORMAT", "text")

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create an AppConfig instance populated from environment variables."""
        return cls()

    def data_sources(self) -> DataSources:
        """Build the DataSources described by this configuration."""
        sources = DataSources()
        sources.data_dir = self.data_dir
        sources.base_url = self.data_url
        return sources

    def chart_config(self) -> ChartConfig:
        """Build the ChartConfig described by this configuration."""
        chart = ChartConfig()
        chart.width = self.chart_width
        chart.height = self.chart_height
        return chart
