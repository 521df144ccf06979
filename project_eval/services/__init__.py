"""
Services module for the Project Evaluation Platform.
"""

from project_eval.services.cache import EvaluationCache, get_cache, reset_cache
from project_eval.services.pocketbase import get_pocketbase_client


def get_evaluation_service():
    """Lazy import to avoid circular dependency."""
    from project_eval.core.dependencies import get_evaluation_service as _get
    return _get()


__all__ = [
    # Core services
    "EvaluationCache",
    "get_cache",
    "reset_cache",
    "get_pocketbase_client",

    # Evaluation services
    "get_evaluation_service",
]
