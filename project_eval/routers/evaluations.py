"""
Evaluation Router - Project Evaluation Platform
project_eval/routers/evaluations.py

Handles evaluation scoring, submission and read views with PocketBase
storage and Redis caching.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request, Response, status
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.responses import JSONResponse

from project_eval.config import settings
from project_eval.core.dependencies import get_evaluation_service, get_rubric, get_score_calculator
from project_eval.core.exceptions import (
    DatabaseConnectionException,
    EntityNotFoundException,
    EvaluationException,
    IncompleteEvaluationException,
    InvalidAnswerValueException,
    MissingEvaluatorException,
    PersistenceFailureException,
    UnknownQuestionException,
)
from project_eval.models.evaluation import (
    ErrorResponse,
    EvaluationBreakdown,
    EvaluationResponse,
    EvaluationSubmit,
    PaginatedEvaluationResponse,
    ProjectEvaluationSummary,
    ScorePreviewRequest,
    ScorePreviewResponse,
)
from project_eval.models.rubric import Rubric
from project_eval.scoring.answer_capture import AnswerSheet
from project_eval.scoring.evaluation_calculator import EvaluationScoreCalculator
from project_eval.scoring.presentation import build_breakdown
from project_eval.services.cache import evaluation_key, get_cache, project_list_key
from project_eval.services.evaluation_service import EvaluationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix=settings.API_V1_PREFIX, tags=["Evaluations"])

RECORD_ID_PATTERN = r"^[A-Za-z0-9_-]{1,64}$"


#  Custom Exception Handlers

FIELD_MESSAGES = {
    "evaluator_name": {
        "missing": "Evaluator name is required",
        "string_too_short": "Evaluator name is required",
        "value_error": "Evaluator name must not be blank",
        "string_too_long": "Evaluator name must not exceed 255 characters",
    },
    "answers": {
        "missing": "Answers are required",
        "dict_type": "Answers must be an object mapping question ids to values",
    },
    "project_id": {
        "string_pattern_mismatch": "Project ID may only contain letters, digits, '_' and '-'",
    },
    "evaluation_id": {
        "string_pattern_mismatch": "Evaluation ID may only contain letters, digits, '_' and '-'",
    },
    "page": {
        "greater_than_equal": "Page must be greater than or equal to 1",
        "int_parsing": "Page must be a valid integer",
    },
    "page_size": {
        "greater_than_equal": "Page size must be greater than or equal to 1",
        "less_than_equal": "Page size must not exceed 500",
        "int_parsing": "Page size must be a valid integer",
    },
}

DEFAULT_MESSAGES = {
    "missing": "Field '{field}' is required",
    "string_too_short": "Field '{field}' is too short",
    "string_too_long": "Field '{field}' is too long",
    "string_pattern_mismatch": "Field '{field}' has invalid format",
    "less_than_equal": "Field '{field}' exceeds maximum allowed value",
    "greater_than_equal": "Field '{field}' is below minimum allowed value",
    "int_type": "Field '{field}' must be an integer",
    "int_parsing": "Field '{field}' must be a valid integer",
    "int_from_float": "Field '{field}' must be a whole number",
    "json_invalid": "Malformed JSON request body",
    "extra_forbidden": "Unknown field '{field}' is not allowed",
}


def get_validation_message(field: str, error_type: str) -> str:
    base_field = field.split(".")[0]
    if base_field in FIELD_MESSAGES:
        field_msgs = FIELD_MESSAGES[base_field]
        for key in field_msgs:
            if key in error_type:
                return field_msgs[key]

    for key, template in DEFAULT_MESSAGES.items():
        if key in error_type:
            return template.format(field=field)

    return f"Invalid value for field '{field}'"


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()

    if not errors:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error_code": "VALIDATION_ERROR",
                "message": "Request validation failed",
                "details": None,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )

    err = errors[0]
    error_type = err.get("type", "")
    loc = err.get("loc", [])

    if "json_invalid" in error_type:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error_code": "INVALID_REQUEST",
                "message": "Malformed JSON request body",
                "details": None,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )

    field = ".".join(str(l) for l in loc if l not in ("body", "path", "query"))
    message = get_validation_message(field, error_type)

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error_code": "VALIDATION_ERROR",
            "message": message,
            "details": {"field": field, "type": error_type} if field else None,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


#  Exception Helpers

def raise_error(status_code: int, error_code: str, message: str, details: Optional[dict] = None):
    raise HTTPException(
        status_code=status_code,
        detail=ErrorResponse(
            error_code=error_code,
            message=message,
            details=details,
            timestamp=datetime.now(timezone.utc)
        ).model_dump(mode="json")
    )


def raise_evaluation_not_found(message: str = "Evaluation not found"):
    raise_error(status.HTTP_404_NOT_FOUND, "EVALUATION_NOT_FOUND", message)


def raise_capture_error(exc: EvaluationException):
    """Map answer capture failures to 422 responses."""
    if isinstance(exc, InvalidAnswerValueException):
        raise_error(
            status.HTTP_422_UNPROCESSABLE_ENTITY, "INVALID_ANSWER_VALUE", str(exc),
            {"question_id": exc.question_id, "allowed": exc.allowed},
        )
    if isinstance(exc, UnknownQuestionException):
        raise_error(
            status.HTTP_422_UNPROCESSABLE_ENTITY, "UNKNOWN_QUESTION", str(exc),
            {"question_id": exc.question_id},
        )
    if isinstance(exc, IncompleteEvaluationException):
        raise_error(
            status.HTTP_422_UNPROCESSABLE_ENTITY, "EVALUATION_INCOMPLETE", str(exc),
            {"missing": exc.missing},
        )
    if isinstance(exc, MissingEvaluatorException):
        raise_error(status.HTTP_422_UNPROCESSABLE_ENTITY, "EVALUATOR_REQUIRED", exc.message)
    raise_error(status.HTTP_422_UNPROCESSABLE_ENTITY, "VALIDATION_ERROR", str(exc))


def raise_persistence_error(exc: PersistenceFailureException):
    """Surface store rejections with their field-level messages."""
    if isinstance(exc, DatabaseConnectionException):
        raise_error(status.HTTP_503_SERVICE_UNAVAILABLE, "STORE_UNAVAILABLE", exc.message)
    raise_error(
        status.HTTP_400_BAD_REQUEST, "PERSISTENCE_FAILURE", exc.message,
        {"fields": exc.field_errors} if exc.field_errors else None,
    )


def invalidate_evaluation_cache(evaluation_id: str, project_id: Optional[str] = None):
    """Invalidate evaluation cache entries in Redis."""
    cache = get_cache()
    if cache:
        try:
            cache.invalidate_evaluation(evaluation_id, project_id)
        except Exception as e:
            logger.warning(f"Cache invalidation failed for evaluation {evaluation_id}: {e}")


ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Rejected by the document store"},
    404: {"model": ErrorResponse, "description": "Evaluation not found"},
    422: {"model": ErrorResponse, "description": "Invalid or incomplete answers"},
    503: {"model": ErrorResponse, "description": "Document store unavailable"},
}


#  Routes

@router.post(
    "/evaluations/score",
    response_model=ScorePreviewResponse,
    responses={422: ERROR_RESPONSES[422]},
    summary="Preview scores",
    description="Scores a possibly partial answer set without persisting it. Unanswered questions count as 0.",
)
async def preview_scores(
    payload: ScorePreviewRequest,
    rubric: Rubric = Depends(get_rubric),
    calculator: EvaluationScoreCalculator = Depends(get_score_calculator),
) -> ScorePreviewResponse:
    try:
        sheet = AnswerSheet(rubric, payload.answers)
    except EvaluationException as e:
        raise_capture_error(e)

    scores = calculator.calculate(sheet.answers).as_dict()
    missing = sheet.missing_questions()
    return ScorePreviewResponse(
        dimension_scores=scores["dimension_scores"],
        total_score=scores["total_score"],
        complete=not missing,
        missing_questions=missing,
    )


@router.post(
    "/projects/{project_id}/evaluations",
    response_model=EvaluationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={k: ERROR_RESPONSES[k] for k in (400, 422, 503)},
    summary="Submit a new evaluation",
    description="Validates a complete answer set, computes dimension and total scores and stores the evaluation.",
)
async def create_evaluation(
    payload: EvaluationSubmit,
    project_id: str = Path(..., pattern=RECORD_ID_PATTERN),
    service: EvaluationService = Depends(get_evaluation_service),
) -> EvaluationResponse:
    try:
        evaluation = service.create(
            project_id,
            evaluator_name=payload.evaluator_name,
            answers=payload.answers,
            user_id=payload.user_id,
        )
    except EvaluationException as e:
        raise_capture_error(e)
    except PersistenceFailureException as e:
        raise_persistence_error(e)

    invalidate_evaluation_cache(evaluation.id, project_id)
    return evaluation


@router.get(
    "/projects/{project_id}/evaluations",
    response_model=PaginatedEvaluationResponse,
    responses={503: ERROR_RESPONSES[503]},
    summary="List a project's evaluations",
    description="Returns stored evaluations of a project, newest first. Scores are returned as stored.",
)
async def list_evaluations(
    project_id: str = Path(..., pattern=RECORD_ID_PATTERN),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=settings.EVALUATIONS_PAGE_SIZE, ge=1, le=500),
    service: EvaluationService = Depends(get_evaluation_service),
) -> PaginatedEvaluationResponse:
    cache_key = project_list_key(project_id, page, page_size)
    cache = get_cache()

    if cache:
        try:
            cached = cache.get(cache_key, PaginatedEvaluationResponse)
            if cached:
                return cached
        except Exception as e:
            logger.warning(f"Cache read failed for {cache_key}: {e}")

    try:
        items, total = service.list_evaluations(project_id, page=page, page_size=page_size)
    except PersistenceFailureException as e:
        raise_persistence_error(e)

    result = PaginatedEvaluationResponse(
        items=items,
        total=total,
        page=page,
        page_size=page_size,
        total_pages=(total + page_size - 1) // page_size if total > 0 else 0,
    )

    if cache:
        try:
            cache.set(cache_key, result, settings.CACHE_TTL_EVALUATION_LIST)
        except Exception as e:
            logger.warning(f"Cache write failed for {cache_key}: {e}")

    return result


@router.get(
    "/projects/{project_id}/evaluations/summary",
    response_model=ProjectEvaluationSummary,
    responses={503: ERROR_RESPONSES[503]},
    summary="Summarize a project's evaluations",
    description="Evaluation count, mean total score and mean score per dimension over all stored evaluations.",
)
async def summarize_project_evaluations(
    project_id: str = Path(..., pattern=RECORD_ID_PATTERN),
    service: EvaluationService = Depends(get_evaluation_service),
) -> ProjectEvaluationSummary:
    try:
        return service.summarize_project(project_id, page_size=settings.EVALUATIONS_PAGE_SIZE)
    except PersistenceFailureException as e:
        raise_persistence_error(e)


def _load_evaluation(evaluation_id: str, service: EvaluationService) -> EvaluationResponse:
    cache_key = evaluation_key(evaluation_id)
    cache = get_cache()

    if cache:
        try:
            cached = cache.get(cache_key, EvaluationResponse)
            if cached:
                return cached
        except Exception as e:
            logger.warning(f"Cache read failed for {cache_key}: {e}")

    try:
        evaluation = service.get_evaluation(evaluation_id)
    except PersistenceFailureException as e:
        raise_persistence_error(e)

    if evaluation is None:
        raise_evaluation_not_found()

    if cache:
        try:
            cache.set(cache_key, evaluation, settings.CACHE_TTL_EVALUATION)
        except Exception as e:
            logger.warning(f"Cache write failed for {cache_key}: {e}")

    return evaluation


@router.get(
    "/evaluations/{evaluation_id}",
    response_model=EvaluationResponse,
    responses={k: ERROR_RESPONSES[k] for k in (404, 503)},
    summary="Get evaluation by ID",
)
async def get_evaluation(
    evaluation_id: str = Path(..., pattern=RECORD_ID_PATTERN),
    service: EvaluationService = Depends(get_evaluation_service),
) -> EvaluationResponse:
    return _load_evaluation(evaluation_id, service)


@router.get(
    "/evaluations/{evaluation_id}/breakdown",
    response_model=EvaluationBreakdown,
    responses={k: ERROR_RESPONSES[k] for k in (404, 503)},
    summary="Evaluation breakdown",
    description="Per-dimension scores with answered questions, score bands and the radar chart series.",
)
async def get_evaluation_breakdown(
    evaluation_id: str = Path(..., pattern=RECORD_ID_PATTERN),
    service: EvaluationService = Depends(get_evaluation_service),
    rubric: Rubric = Depends(get_rubric),
) -> EvaluationBreakdown:
    evaluation = _load_evaluation(evaluation_id, service)
    return build_breakdown(rubric, evaluation)


@router.put(
    "/evaluations/{evaluation_id}",
    response_model=EvaluationResponse,
    responses=ERROR_RESPONSES,
    summary="Replace an evaluation",
    description="Replaces the stored answers wholesale and recomputes every score. No score history is kept.",
)
async def update_evaluation(
    payload: EvaluationSubmit,
    evaluation_id: str = Path(..., pattern=RECORD_ID_PATTERN),
    service: EvaluationService = Depends(get_evaluation_service),
) -> EvaluationResponse:
    try:
        evaluation = service.edit(
            evaluation_id,
            evaluator_name=payload.evaluator_name,
            answers=payload.answers,
            user_id=payload.user_id,
        )
    except EntityNotFoundException:
        raise_evaluation_not_found()
    except EvaluationException as e:
        raise_capture_error(e)
    except PersistenceFailureException as e:
        raise_persistence_error(e)

    invalidate_evaluation_cache(evaluation_id, evaluation.project_id)
    return evaluation


@router.delete(
    "/evaluations/{evaluation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={k: ERROR_RESPONSES[k] for k in (404, 503)},
    summary="Delete an evaluation",
)
async def delete_evaluation(
    evaluation_id: str = Path(..., pattern=RECORD_ID_PATTERN),
    service: EvaluationService = Depends(get_evaluation_service),
) -> Response:
    project_id = None
    try:
        existing = service.get_evaluation(evaluation_id)
        project_id = existing.project_id if existing else None
        service.delete_evaluation(evaluation_id)
    except EntityNotFoundException:
        invalidate_evaluation_cache(evaluation_id, project_id)
        raise_evaluation_not_found("Evaluation was already removed")
    except PersistenceFailureException as e:
        raise_persistence_error(e)

    invalidate_evaluation_cache(evaluation_id, project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
