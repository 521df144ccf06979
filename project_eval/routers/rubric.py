"""
Rubric Router - Project Evaluation Platform
project_eval/routers/rubric.py

Read-only access to the dimensions and questions evaluations are scored against.
"""

from fastapi import APIRouter, Depends, Path, status

from project_eval.config import settings
from project_eval.models.evaluation import ErrorResponse
from project_eval.models.rubric import Dimension, Rubric
from project_eval.core.dependencies import get_rubric
from project_eval.routers.evaluations import raise_error

router = APIRouter(prefix=settings.API_V1_PREFIX, tags=["Rubric"])


@router.get(
    "/rubric",
    response_model=Rubric,
    summary="Get the evaluation rubric",
    description="All dimensions with their questions, in scoring order.",
)
async def get_evaluation_rubric(rubric: Rubric = Depends(get_rubric)) -> Rubric:
    return rubric


@router.get(
    "/rubric/dimensions/{dimension_id}",
    response_model=Dimension,
    responses={404: {"model": ErrorResponse, "description": "Dimension not found"}},
    summary="Get a single dimension",
)
async def get_rubric_dimension(
    dimension_id: str = Path(..., min_length=1, max_length=64),
    rubric: Rubric = Depends(get_rubric),
) -> Dimension:
    dimension = rubric.dimension(dimension_id)
    if dimension is None:
        raise_error(
            status.HTTP_404_NOT_FOUND,
            "DIMENSION_NOT_FOUND",
            f"Dimension '{dimension_id}' not found",
        )
    return dimension
