# project_eval/scoring/evaluation_calculator.py
"""
Evaluation Score Calculator
---------------------------
Derives per-dimension and overall scores from a rubric and an answer set.

Formula:
    dim_avg(D)       = Σ answers[q] for q in D / |D.questions|     (missing = 0)
    dim_score(D)     = round(dim_avg(D), 1)
    total_score      = round(Σ dim_avg(D) / |dimensions|, 1)

The total is the mean of the UNROUNDED dimension averages, rounded once;
it is not the mean of the rounded dimension scores. Rounding is
ROUND_HALF_UP at one decimal, applied exactly twice.

Unanswered questions count as 0 and still count in the divisor, so a gap
pulls its dimension toward 0. Submission requires a complete answer set,
so this only shows in score previews.
"""
import structlog
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Mapping, Union

from project_eval.models.rubric import Rubric
from project_eval.scoring.utils import clamp, mean, round_score, to_decimal

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class EvaluationScores:
    """Output of EvaluationScoreCalculator.calculate()."""
    dimension_scores: Dict[str, Decimal]   # dimension id -> [0, 100], one decimal
    total_score: Decimal                   # [0, 100], one decimal
    dimension_averages: Dict[str, Decimal] = field(default_factory=dict)  # unrounded

    def as_dict(self) -> Dict[str, object]:
        """Float form used for storage and API responses."""
        return {
            "dimension_scores": {k: float(v) for k, v in self.dimension_scores.items()},
            "total_score": float(self.total_score),
        }


class EvaluationScoreCalculator:
    """Calculate evaluation scores against a fixed rubric."""

    def __init__(self, rubric: Rubric):
        self.rubric = rubric

    def dimension_average(self, dimension_id: str, answers: Mapping[str, Union[int, float]]) -> Decimal:
        """Unrounded mean over ALL questions of one dimension."""
        dimension = self.rubric.dimension(dimension_id)
        if dimension is None:
            raise KeyError(f"Unknown dimension: {dimension_id}")
        total = sum(
            (to_decimal(answers.get(q.id, 0)) for q in dimension.questions),
            Decimal("0"),
        )
        return total / Decimal(len(dimension.questions))

    def calculate(self, answers: Mapping[str, Union[int, float]]) -> EvaluationScores:
        """
        Args:
            answers: Mapping of question id -> normalized answer (0-100).
                     Ids not in the rubric are ignored.

        Returns:
            EvaluationScores with dimension_scores (rubric order) and total_score.

        Examples:
            >>> calc = EvaluationScoreCalculator(rubric)
            >>> calc.calculate({"q1": 100, "q2": 80, "q3": 0, "q4": 40}).total_score
            Decimal('55.0')
        """
        averages: Dict[str, Decimal] = {}
        dimension_scores: Dict[str, Decimal] = {}

        for dimension in self.rubric.dimensions:
            average = self.dimension_average(dimension.id, answers)
            averages[dimension.id] = average
            dimension_scores[dimension.id] = clamp(round_score(average))

        total_score = clamp(round_score(mean(averages.values())))

        logger.debug(
            "evaluation_scored",
            rubric_version=self.rubric.version,
            answered=sum(1 for qid in answers if self.rubric.question(qid) is not None),
            questions=self.rubric.question_count,
            dimension_scores={k: float(v) for k, v in dimension_scores.items()},
            total_score=float(total_score),
        )

        return EvaluationScores(
            dimension_scores=dimension_scores,
            total_score=total_score,
            dimension_averages=averages,
        )
