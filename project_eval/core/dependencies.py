"""
Dependencies - Project Evaluation Platform
project_eval/core/dependencies.py

FastAPI dependency injection for the rubric, calculator, repository and service.
"""

from functools import lru_cache

from project_eval.models.rubric import Rubric
from project_eval.repositories.evaluation_repository import EvaluationRepository
from project_eval.scoring.criteria import build_default_rubric
from project_eval.scoring.evaluation_calculator import EvaluationScoreCalculator
from project_eval.services.evaluation_service import EvaluationService


@lru_cache()
def get_rubric() -> Rubric:
    """Build the rubric once per process."""
    return build_default_rubric()


@lru_cache()
def get_score_calculator() -> EvaluationScoreCalculator:
    """Get cached EvaluationScoreCalculator bound to the rubric."""
    return EvaluationScoreCalculator(get_rubric())


@lru_cache()
def get_evaluation_repository() -> EvaluationRepository:
    """Get cached EvaluationRepository instance."""
    return EvaluationRepository()


@lru_cache()
def get_evaluation_service() -> EvaluationService:
    """Get cached EvaluationService instance."""
    return EvaluationService(
        get_evaluation_repository(),
        get_rubric(),
        calculator=get_score_calculator(),
    )
