"""
Pydantic response models for the API.

Optional value fields default to None: a year without data is reported as
null, exactly as the charts draw it (a gap).
"""

from __future__ import annotations

from pydantic import BaseModel, Field


# ── Datasets ──────────────────────────────────────────────────────────────────

class DatasetOut(BaseModel):
    """Records of one dataset, ascending by year."""
    name: str = Field(..., examples=["budget"])
    row_count: int = Field(..., examples=[12])
    records: list[dict[str, int | float | None]] = Field(
        ...,
        description=(
            "One object per year. Budget amounts (budgeted, actual, "
            "inflation_adjusted) are in € million, crime figures are counts and "
            "clearance figures are percentages."
        ),
    )


# ── Charts and steps ──────────────────────────────────────────────────────────

class ChartSummaryOut(BaseModel):
    """A chart with its layers and reveal steps."""
    name: str = Field(..., examples=["budget"])
    title: str = Field(..., examples=["De begroting"])
    width: float = Field(..., description="Plot area width in pixels")
    height: float = Field(..., description="Plot area height in pixels")
    x_domain: list[float]
    y_domain: list[float]
    layers: list[str]
    steps: list[int]


class StepOut(BaseModel):
    """Target visibility of every layer after entering a step."""
    chart: str = Field(..., examples=["clearance"])
    step: int = Field(..., examples=[2])
    duration_ms: int = Field(..., examples=[800])
    opacity: dict[str, float] = Field(..., description="Layer name -> opacity in [0, 1]")
    text: str | None = Field(None, description="Narrative text shown at this step")


# ── Validation ────────────────────────────────────────────────────────────────

class ValidationIssueOut(BaseModel):
    """A data problem found while transforming or checking a dataset."""
    check: str = Field(..., examples=["malformed_cell"])
    dataset: str = Field(..., examples=["clearance"])
    severity: str = Field(..., description="error | warning | info")
    detail: str
    sample: str | None = None
    count: int = 1


class ValidationOut(BaseModel):
    is_valid: bool
    passed_checks: list[str]
    failed_checks: list[str]
    issues: list[ValidationIssueOut]
    summary: dict[str, int]


# ── Errors ────────────────────────────────────────────────────────────────────

class ErrorResponse(BaseModel):
    """Body of the 400 and 500 responses."""
    error: str = Field(..., examples=["Bad request"])
    detail: str | None = Field(None, examples=["Opacity for 'grid' must be in [0, 1], got 2"])
    status_code: int = Field(..., examples=[400])
