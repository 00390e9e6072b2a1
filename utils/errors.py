"""Exception hierarchy shared by the story tools.

Every error the data, chart and reveal layers raise on purpose derives from
StoryError so the CLI and the API can tell expected failures apart from bugs.
"""

from typing import List, Optional


class StoryError(Exception):
    """Base class for expected story build failures."""


class MalformedNumberError(StoryError, ValueError):
    """A numeric cell could not be parsed."""

    def __init__(self, text: str, kind: str):
        self.text = text
        self.kind = kind
        super().__init__(f"Malformed {kind} value: {text!r}")


class MalformedCellError(StoryError, ValueError):
    """A malformed cell was found while parsing in strict mode."""

    def __init__(self, dataset: str, row: int, column: str, text: str):
        self.dataset = dataset
        self.row = row
        self.column = column
        self.text = text
        super().__init__(
            f"{dataset}: row {row}, column {column!r} has malformed value {text!r}"
        )


class MissingColumnError(StoryError, KeyError):
    """A required CSV column is absent from the header row."""

    def __init__(self, dataset: str, field: str, accepted: List[str]):
        self.dataset = dataset
        self.field = field
        self.accepted = accepted
        super().__init__(
            f"{dataset}: no column for {field!r} (accepted headers: {', '.join(accepted)})"
        )

    def __str__(self) -> str:
        return self.args[0]


class DataLoadError(StoryError):
    """One or more of the datasets could not be loaded."""

    def __init__(self, failures: dict):
        self.failures = dict(failures)
        detail = "; ".join(f"{name}: {err}" for name, err in sorted(self.failures.items()))
        super().__init__(f"Failed to load {len(self.failures)} dataset(s): {detail}")


class ChartBuildError(StoryError):
    """A chart could not be constructed from its records."""


class UnknownStepError(StoryError, ValueError):
    """A step index is not part of a chart's reveal table."""

    def __init__(self, chart: str, step: int, valid: Optional[List[int]] = None):
        self.chart = chart
        self.step = step
        self.valid = valid or []
        super().__init__(
            f"Chart {chart!r} has no step {step} (valid steps: {self.valid})"
        )
