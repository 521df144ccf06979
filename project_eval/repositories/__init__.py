"""
Repositories Package - Project Evaluation Platform
project_eval/repositories/__init__.py

Data access layer for PocketBase document store operations.
"""

from project_eval.repositories.base import BaseRepository
from project_eval.repositories.evaluation_repository import EvaluationRepository

__all__ = [
    "BaseRepository",
    "EvaluationRepository",
]
