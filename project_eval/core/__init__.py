"""
Core Package - Project Evaluation Platform
project_eval/core/__init__.py

Core infrastructure: dependencies, exceptions, logging.
"""

from project_eval.core.dependencies import (
    get_evaluation_repository,
    get_evaluation_service,
    get_rubric,
    get_score_calculator,
)
from project_eval.core.exceptions import (
    DatabaseConnectionException,
    EntityNotFoundException,
    EvaluationException,
    IncompleteEvaluationException,
    InvalidAnswerValueException,
    MissingEvaluatorException,
    PersistenceFailureException,
    RepositoryException,
    UnknownQuestionException,
)

__all__ = [
    # Dependencies
    "get_evaluation_repository",
    "get_evaluation_service",
    "get_rubric",
    "get_score_calculator",
    # Exceptions
    "DatabaseConnectionException",
    "EntityNotFoundException",
    "EvaluationException",
    "IncompleteEvaluationException",
    "InvalidAnswerValueException",
    "MissingEvaluatorException",
    "PersistenceFailureException",
    "RepositoryException",
    "UnknownQuestionException",
]
