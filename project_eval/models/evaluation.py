from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import Dict, List, Optional

from project_eval.models.enumerations import EvaluationStatus, QuestionType, ScoreBand


class EvaluationSubmit(BaseModel):
    """
    Payload for creating or fully replacing an evaluation.
    """

    evaluator_name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Name of the person filling in the evaluation"
    )

    user_id: Optional[str] = Field(
        default=None,
        max_length=64,
        description="Reference to the submitting user in the document store"
    )

    answers: Dict[str, int] = Field(
        ...,
        description="Question id -> normalized answer (0/100 or 20..100)"
    )

    @field_validator("evaluator_name")
    @classmethod
    def strip_evaluator_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Evaluator name must not be blank")
        return v


class EvaluationResponse(BaseModel):
    """
    Stored evaluation record returned in API responses.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="Record id assigned by the document store")
    project_id: str = Field(..., description="Owning project reference")
    evaluator_name: str = Field(default="")
    user_id: Optional[str] = Field(default=None)

    answers: Dict[str, int] = Field(default_factory=dict)

    dimension_scores: Dict[str, float] = Field(
        default_factory=dict,
        description="Dimension id -> score in [0, 100], one decimal"
    )

    total_score: float = Field(
        ...,
        ge=0,
        le=100,
        description="Mean of unrounded dimension averages, one decimal"
    )

    rubric_version: Optional[str] = Field(
        default=None,
        description="Rubric version the record was scored against"
    )

    status: EvaluationStatus = Field(default=EvaluationStatus.RETRIEVED)

    created_at: Optional[datetime] = Field(default=None)
    updated_at: Optional[datetime] = Field(default=None)


class PaginatedEvaluationResponse(BaseModel):
    """
    Paginated response for listing a project's evaluations, newest first.
    """

    items: List[EvaluationResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class ScorePreviewRequest(BaseModel):
    answers: Dict[str, int] = Field(default_factory=dict)


class ScorePreviewResponse(BaseModel):
    """
    Scores for a possibly partial answer set; nothing is persisted.
    """

    dimension_scores: Dict[str, float]
    total_score: float
    complete: bool
    missing_questions: Dict[str, List[str]] = Field(default_factory=dict)


class QuestionBreakdown(BaseModel):
    id: str
    text: str
    type: QuestionType
    answer: Optional[int] = None
    answer_label: str


class DimensionBreakdown(BaseModel):
    id: str
    name: str
    description: str
    score: float
    band: ScoreBand
    questions: List[QuestionBreakdown]


class RadarPoint(BaseModel):
    subject: str
    score: float
    full_mark: int = 100


class EvaluationBreakdown(BaseModel):
    """
    Read view of a stored evaluation: per-dimension detail and radar series.
    """

    evaluation_id: str
    project_id: str
    evaluator_name: str
    total_score: float
    band: ScoreBand
    dimensions: List[DimensionBreakdown]
    radar: List[RadarPoint]


class ProjectEvaluationSummary(BaseModel):
    """
    Aggregate over the stored evaluations of one project.
    """

    project_id: str
    evaluation_count: int
    average_total_score: Optional[float] = None
    average_dimension_scores: Dict[str, float] = Field(default_factory=dict)
    latest_evaluation_id: Optional[str] = None


class ErrorResponse(BaseModel):
    """
    Standard error response model.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict] = Field(default=None, description="Additional error details")
    timestamp: datetime = Field(..., description="Error occurrence timestamp")
