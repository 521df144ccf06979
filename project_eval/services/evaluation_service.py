"""
Evaluation Service - Project Evaluation Platform
project_eval/services/evaluation_service.py

Draft -> scored -> persisted lifecycle for evaluations.

Scoring and persistence form one submit: the draft is only marked
persisted after the store accepted the write, so any failure leaves
the draft's answers and status as they were for a retry.
"""

import logging
from typing import List, Mapping, Optional, Tuple

from project_eval.core.exceptions import EntityNotFoundException, MissingEvaluatorException
from project_eval.models.enumerations import EvaluationStatus
from project_eval.models.evaluation import EvaluationResponse, ProjectEvaluationSummary
from project_eval.models.rubric import Rubric
from project_eval.repositories.evaluation_repository import EvaluationRepository
from project_eval.scoring.answer_capture import EvaluationDraft, retain_known_answers
from project_eval.scoring.evaluation_calculator import (
    EvaluationScoreCalculator,
    EvaluationScores,
)
from project_eval.scoring.presentation import summarize_evaluations

logger = logging.getLogger(__name__)


class EvaluationService:
    """Coordinates answer capture, scoring and the evaluation repository."""

    def __init__(
        self,
        repository: EvaluationRepository,
        rubric: Rubric,
        calculator: Optional[EvaluationScoreCalculator] = None,
    ):
        self.repository = repository
        self.rubric = rubric
        self.calculator = calculator or EvaluationScoreCalculator(rubric)

    def new_draft(
        self,
        project_id: str,
        evaluator_name: str = "",
        user_id: Optional[str] = None,
    ) -> EvaluationDraft:
        return EvaluationDraft(
            self.rubric, project_id, evaluator_name=evaluator_name, user_id=user_id
        )

    def load_draft(self, evaluation_id: str) -> EvaluationDraft:
        """
        Re-enter draft from a stored evaluation with its answers pre-loaded.

        Raises:
            EntityNotFoundException: evaluation no longer exists
        """
        record = self.repository.get_by_id(evaluation_id)
        if record is None:
            raise EntityNotFoundException("Evaluation", evaluation_id)

        return EvaluationDraft(
            self.rubric,
            record["project_id"],
            evaluator_name=record["evaluator_name"],
            user_id=record["user_id"],
            answers=retain_known_answers(self.rubric, record["answers"]),
            evaluation_id=evaluation_id,
        )

    def score(self, draft: EvaluationDraft) -> EvaluationScores:
        """Score a complete draft without persisting it."""
        draft.ensure_complete()
        return self.calculator.calculate(draft.answers)

    def submit(self, draft: EvaluationDraft) -> EvaluationResponse:
        """
        Score a complete draft and write it to the store.

        New drafts create a record; drafts loaded from a stored evaluation
        replace that record wholesale.

        Raises:
            MissingEvaluatorException: evaluator name blank
            IncompleteEvaluationException: unanswered questions remain
            PersistenceFailureException: store rejected the write
            EntityNotFoundException: edited evaluation was removed meanwhile
        """
        if not draft.evaluator_name or not draft.evaluator_name.strip():
            raise MissingEvaluatorException()

        scores = self.score(draft)
        payload = scores.as_dict()
        answers = draft.answers

        if draft.is_edit:
            record = self.repository.update(
                draft.evaluation_id,
                project_id=draft.project_id,
                evaluator_name=draft.evaluator_name.strip(),
                answers=answers,
                dimension_scores=payload["dimension_scores"],
                total_score=payload["total_score"],
                rubric_version=self.rubric.version,
                user_id=draft.user_id,
            )
        else:
            record = self.repository.create(
                project_id=draft.project_id,
                evaluator_name=draft.evaluator_name.strip(),
                answers=answers,
                dimension_scores=payload["dimension_scores"],
                total_score=payload["total_score"],
                rubric_version=self.rubric.version,
                user_id=draft.user_id,
            )

        draft.evaluation_id = record["id"]
        draft.status = EvaluationStatus.PERSISTED
        logger.info(
            f"Evaluation {record['id']} persisted for project {draft.project_id} "
            f"(total {payload['total_score']})"
        )
        return EvaluationResponse(**record, status=EvaluationStatus.PERSISTED)

    def create(
        self,
        project_id: str,
        evaluator_name: str,
        answers: Mapping[str, int],
        user_id: Optional[str] = None,
    ) -> EvaluationResponse:
        """Capture a full answer set for a project and submit it."""
        draft = self.new_draft(project_id, evaluator_name=evaluator_name, user_id=user_id)
        for question_id, value in answers.items():
            draft.record_answer(question_id, value)
        return self.submit(draft)

    def edit(
        self,
        evaluation_id: str,
        evaluator_name: str,
        answers: Mapping[str, int],
        user_id: Optional[str] = None,
    ) -> EvaluationResponse:
        """
        Replace a stored evaluation with a new answer set, rescored.

        The stored answers are discarded, not merged.
        """
        draft = self.load_draft(evaluation_id)
        draft.evaluator_name = evaluator_name
        if user_id is not None:
            draft.user_id = user_id
        for question_id in list(draft.answers):
            draft.clear_answer(question_id)
        for question_id, value in answers.items():
            draft.record_answer(question_id, value)
        return self.submit(draft)

    def get_evaluation(self, evaluation_id: str) -> Optional[EvaluationResponse]:
        record = self.repository.get_by_id(evaluation_id)
        if record is None:
            return None
        return EvaluationResponse(**record)

    def list_evaluations(
        self,
        project_id: str,
        page: int = 1,
        page_size: int = 50,
    ) -> Tuple[List[EvaluationResponse], int]:
        """Stored evaluations of a project, newest first, scores as stored."""
        records, total = self.repository.list_by_project(project_id, page=page, page_size=page_size)
        return [EvaluationResponse(**r) for r in records], total

    def summarize_project(self, project_id: str, page_size: int = 50) -> ProjectEvaluationSummary:
        """Aggregate every stored evaluation of a project."""
        evaluations: List[EvaluationResponse] = []
        page = 1
        while True:
            items, total = self.list_evaluations(project_id, page=page, page_size=page_size)
            evaluations.extend(items)
            if not items or len(evaluations) >= total:
                break
            page += 1
        return summarize_evaluations(project_id, self.rubric, evaluations)

    def delete_evaluation(self, evaluation_id: str) -> None:
        """
        Raises:
            EntityNotFoundException: evaluation was already removed
        """
        self.repository.delete(evaluation_id)
