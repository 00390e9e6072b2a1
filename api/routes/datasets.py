"""
Dataset endpoints.

GET /api/v1/datasets              → row counts per dataset
GET /api/v1/datasets/{name}       → typed records of one dataset
GET /api/v1/validation            → data issues collected while loading
"""

from fastapi import APIRouter, Depends, HTTPException

from api.models import DatasetOut, ValidationOut
from api.store import get_story
from story.article import Story

router = APIRouter(tags=["datasets"])


@router.get("/datasets", summary="List datasets")
def list_datasets(story: Story = Depends(get_story)) -> dict[str, int]:
    """Return the number of records per dataset."""
    return story.datasets.row_counts()


@router.get(
    "/datasets/{name}",
    response_model=DatasetOut,
    summary="Records of one dataset",
)
def get_dataset(name: str, story: Story = Depends(get_story)) -> DatasetOut:
    """Return the records of *name* (budget, crime or clearance), ascending by year.

    Missing values are null.
    """
    try:
        records = story.datasets.get(name)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown dataset {name!r}")
    return DatasetOut(
        name=name,
        row_count=len(records),
        records=[r.to_dict() for r in records],
    )


@router.get("/validation", response_model=ValidationOut, summary="Data issues")
def get_validation(story: Story = Depends(get_story)) -> ValidationOut:
    """Return the issues found while parsing and checking the datasets."""
    validation = story.datasets.validation
    data = validation.to_dict()
    return ValidationOut(
        is_valid=validation.is_valid(),
        passed_checks=data["passed_checks"],
        failed_checks=data["failed_checks"],
        issues=data["issues"],
        summary=data["summary"],
    )
