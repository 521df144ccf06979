"""
Evaluation Repository - Project Evaluation Platform
project_eval/repositories/evaluation_repository.py

Data access layer for Evaluation records in the PocketBase document store.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import httpx

from project_eval.config import settings
from project_eval.core.exceptions import EntityNotFoundException
from project_eval.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class EvaluationRepository(BaseRepository):
    """Repository for Evaluation CRUD operations."""

    COLLECTION = settings.POCKETBASE_EVALUATIONS_COLLECTION
    ENTITY_TYPE = "Evaluation"

    def __init__(self, client: Optional[httpx.Client] = None, collection: Optional[str] = None):
        super().__init__(client=client, collection=collection)

    def create(
        self,
        project_id: str,
        evaluator_name: str,
        answers: Dict[str, int],
        dimension_scores: Dict[str, float],
        total_score: float,
        rubric_version: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Create a new evaluation record.

        Args:
            project_id: Owning project reference
            evaluator_name: Name of the evaluator
            answers: Question id -> normalized answer
            dimension_scores: Dimension id -> score
            total_score: Overall score
            rubric_version: Rubric version the scores were computed with
            user_id: Submitting user reference

        Returns:
            Created evaluation dict
        """
        body = self._to_payload(
            project_id, evaluator_name, answers, dimension_scores,
            total_score, rubric_version, user_id,
        )
        record = self.execute_request("POST", self.records_path, json=body)
        logger.info(f"Created evaluation {record['id']} for project {project_id}")
        return self._record_to_dict(record)

    def update(
        self,
        evaluation_id: str,
        project_id: str,
        evaluator_name: str,
        answers: Dict[str, int],
        dimension_scores: Dict[str, float],
        total_score: float,
        rubric_version: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Replace every stored field of an evaluation.

        Returns:
            Updated evaluation dict

        Raises:
            EntityNotFoundException: record no longer exists
        """
        body = self._to_payload(
            project_id, evaluator_name, answers, dimension_scores,
            total_score, rubric_version, user_id,
        )
        record = self.execute_request(
            "PATCH", self.record_path(evaluation_id), json=body, record_id=evaluation_id
        )
        logger.info(f"Replaced evaluation {evaluation_id}")
        return self._record_to_dict(record)

    def get_by_id(self, evaluation_id: str) -> Optional[Dict[str, Any]]:
        """
        Retrieve an evaluation by ID.

        Returns:
            Evaluation dict or None if not found
        """
        try:
            record = self.execute_request(
                "GET", self.record_path(evaluation_id), record_id=evaluation_id
            )
        except EntityNotFoundException:
            return None
        return self._record_to_dict(record)

    def list_by_project(
        self,
        project_id: str,
        page: int = 1,
        page_size: int = 50,
    ) -> Tuple[List[Dict[str, Any]], int]:
        """
        Retrieve a project's evaluations, newest first.

        Args:
            project_id: Owning project reference
            page: Page number (1-indexed)
            page_size: Number of items per page

        Returns:
            Tuple of (list of evaluation dicts, total count)
        """
        params = {
            "page": page,
            "perPage": page_size,
            "filter": f"project = {self.quote_filter_value(project_id)}",
            "sort": "-created",
        }
        body = self.execute_request("GET", self.records_path, params=params) or {}
        items = [self._record_to_dict(r) for r in body.get("items", [])]
        return items, int(body.get("totalItems", len(items)))

    def delete(self, evaluation_id: str) -> None:
        """
        Delete an evaluation.

        Raises:
            EntityNotFoundException: record already removed
        """
        self.execute_request("DELETE", self.record_path(evaluation_id), record_id=evaluation_id)
        logger.info(f"Deleted evaluation {evaluation_id}")

    def exists(self, evaluation_id: str) -> bool:
        return self.get_by_id(evaluation_id) is not None

    def _to_payload(
        self,
        project_id: str,
        evaluator_name: str,
        answers: Dict[str, int],
        dimension_scores: Dict[str, float],
        total_score: float,
        rubric_version: Optional[str],
        user_id: Optional[str],
    ) -> Dict[str, Any]:
        return {
            "project": project_id,
            "user": user_id or "",
            "evaluator_name": evaluator_name,
            "answers": answers,
            "dimension_scores": dimension_scores,
            "total_score": total_score,
            "rubric_version": rubric_version or "",
        }

    def _record_to_dict(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Convert a PocketBase record to an evaluation dict."""
        return {
            "id": record["id"],
            "project_id": record.get("project", ""),
            "user_id": record.get("user") or None,
            "evaluator_name": record.get("evaluator_name") or "",
            "answers": {k: int(v) for k, v in (record.get("answers") or {}).items()},
            "dimension_scores": {
                k: float(v) for k, v in (record.get("dimension_scores") or {}).items()
            },
            "total_score": float(record.get("total_score") or 0),
            "rubric_version": record.get("rubric_version") or None,
            "created_at": self.parse_timestamp(record.get("created")),
            "updated_at": self.parse_timestamp(record.get("updated")),
        }
