"""
Evaluation Read Views
project_eval/scoring/presentation.py

Shapes stored evaluation records for display: per-dimension breakdown,
radar series, score bands and a per-project summary. Scores are taken
from the stored record as-is, never recomputed.
"""

from decimal import Decimal
from typing import Dict, List, Mapping, Optional, Sequence

from project_eval.models.enumerations import QuestionType, ScoreBand
from project_eval.models.evaluation import (
    DimensionBreakdown,
    EvaluationBreakdown,
    EvaluationResponse,
    ProjectEvaluationSummary,
    QuestionBreakdown,
    RadarPoint,
)
from project_eval.models.rubric import Question, Rubric
from project_eval.scoring.utils import mean, round_score, to_decimal

UNANSWERED_LABEL = "Sin respuesta"

# (lower bound, band), checked top-down
SCORE_BANDS = (
    (80, ScoreBand.EXCELLENT),
    (60, ScoreBand.GOOD),
    (40, ScoreBand.FAIR),
)


def score_band(score: float) -> ScoreBand:
    for threshold, band in SCORE_BANDS:
        if score >= threshold:
            return band
    return ScoreBand.POOR


def answer_label(question: Question, value: Optional[int]) -> str:
    """Human-readable answer: Sí/No for boolean, n/5 for likert."""
    if value is None:
        return UNANSWERED_LABEL
    if question.type == QuestionType.BOOLEAN:
        return "Sí" if value == 100 else "No"
    return f"{value // 20}/5"


def radar_series(rubric: Rubric, dimension_scores: Mapping[str, float]) -> List[RadarPoint]:
    """One point per dimension in rubric order; missing scores plot as 0."""
    return [
        RadarPoint(subject=d.name, score=dimension_scores.get(d.id, 0))
        for d in rubric.dimensions
    ]


def build_breakdown(rubric: Rubric, evaluation: EvaluationResponse) -> EvaluationBreakdown:
    dimensions: List[DimensionBreakdown] = []
    for dimension in rubric.dimensions:
        score = evaluation.dimension_scores.get(dimension.id, 0)
        questions = [
            QuestionBreakdown(
                id=q.id,
                text=q.text,
                type=q.type,
                answer=evaluation.answers.get(q.id),
                answer_label=answer_label(q, evaluation.answers.get(q.id)),
            )
            for q in dimension.questions
        ]
        dimensions.append(
            DimensionBreakdown(
                id=dimension.id,
                name=dimension.name,
                description=dimension.description,
                score=score,
                band=score_band(score),
                questions=questions,
            )
        )

    return EvaluationBreakdown(
        evaluation_id=evaluation.id,
        project_id=evaluation.project_id,
        evaluator_name=evaluation.evaluator_name,
        total_score=evaluation.total_score,
        band=score_band(evaluation.total_score),
        dimensions=dimensions,
        radar=radar_series(rubric, evaluation.dimension_scores),
    )


def summarize_evaluations(
    project_id: str,
    rubric: Rubric,
    evaluations: Sequence[EvaluationResponse],
) -> ProjectEvaluationSummary:
    """
    Aggregate stored scores of a project's evaluations.

    evaluations are expected newest first, as returned by the repository.
    Dimension means only include records that carry that dimension.
    """
    if not evaluations:
        return ProjectEvaluationSummary(project_id=project_id, evaluation_count=0)

    per_dimension: Dict[str, List[Decimal]] = {d.id: [] for d in rubric.dimensions}
    for evaluation in evaluations:
        for dimension_id, values in per_dimension.items():
            if dimension_id in evaluation.dimension_scores:
                values.append(to_decimal(evaluation.dimension_scores[dimension_id]))

    average_total = mean(to_decimal(e.total_score) for e in evaluations)

    return ProjectEvaluationSummary(
        project_id=project_id,
        evaluation_count=len(evaluations),
        average_total_score=float(round_score(average_total)),
        average_dimension_scores={
            dimension_id: float(round_score(mean(values)))
            for dimension_id, values in per_dimension.items()
            if values
        },
        latest_evaluation_id=evaluations[0].id,
    )
