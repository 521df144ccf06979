"""
Answer Capture
project_eval/scoring/answer_capture.py

Builds a validated answer set for one evaluation before it can be scored.

Answers are normalized integers: boolean questions take 0 or 100, likert
questions take 20, 40, 60, 80 or 100 (the 1-5 scale times 20). Any other
value is rejected when recorded, so the calculator only ever sees values
from the domain of their question type.
"""

import logging
from typing import Dict, List, Mapping, Optional, Union

from project_eval.core.exceptions import (
    IncompleteEvaluationException,
    InvalidAnswerValueException,
    UnknownQuestionException,
)
from project_eval.models.enumerations import EvaluationStatus
from project_eval.models.rubric import Dimension, Question, Rubric

logger = logging.getLogger(__name__)


def validate_answer(question: Question, value: Union[int, float]) -> int:
    """
    Check a raw answer against the domain of its question type.

    Args:
        question: Rubric question being answered
        value: Normalized answer; integral floats such as 80.0 are accepted

    Returns:
        The value as an int

    Raises:
        InvalidAnswerValueException: value outside the allowed set
    """
    allowed = question.allowed_values
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidAnswerValueException(question.id, value, allowed)
    if isinstance(value, float) and not value.is_integer():
        raise InvalidAnswerValueException(question.id, value, allowed)

    normalized = int(value)
    if normalized not in allowed:
        raise InvalidAnswerValueException(question.id, value, allowed)
    return normalized


def is_dimension_complete(dimension: Dimension, answers: Mapping[str, int]) -> bool:
    """True iff every question of the dimension has an answer."""
    return all(q.id in answers for q in dimension.questions)


def retain_known_answers(rubric: Rubric, answers: Mapping[str, Union[int, float]]) -> Dict[str, Union[int, float]]:
    """
    Filter stored answers down to questions the rubric still has.

    Used when a stored record re-enters draft for editing; values are
    validated afterwards like fresh answers.
    """
    known = {}
    for question_id, value in answers.items():
        if rubric.question(question_id) is None:
            logger.warning(f"Dropping stored answer for retired question {question_id}")
            continue
        known[question_id] = value
    return known


class AnswerSheet:
    """In-progress answer set for a single evaluation session."""

    def __init__(self, rubric: Rubric, answers: Optional[Mapping[str, Union[int, float]]] = None):
        self.rubric = rubric
        self._answers: Dict[str, int] = {}
        for question_id, value in (answers or {}).items():
            self.record_answer(question_id, value)

    @property
    def answers(self) -> Dict[str, int]:
        return dict(self._answers)

    def __len__(self) -> int:
        return len(self._answers)

    def record_answer(self, question_id: str, value: Union[int, float]) -> None:
        """Validate and upsert one answer."""
        question = self.rubric.question(question_id)
        if question is None:
            raise UnknownQuestionException(question_id)
        self._answers[question_id] = validate_answer(question, value)

    def clear_answer(self, question_id: str) -> None:
        self._answers.pop(question_id, None)

    def is_dimension_complete(self, dimension_id: str) -> bool:
        dimension = self.rubric.dimension(dimension_id)
        if dimension is None:
            raise KeyError(f"Unknown dimension: {dimension_id}")
        return is_dimension_complete(dimension, self._answers)

    def missing_questions(self) -> Dict[str, List[str]]:
        """Unanswered question ids grouped by dimension, in rubric order."""
        missing: Dict[str, List[str]] = {}
        for dimension in self.rubric.dimensions:
            ids = [q.id for q in dimension.questions if q.id not in self._answers]
            if ids:
                missing[dimension.id] = ids
        return missing

    def is_complete(self) -> bool:
        return all(is_dimension_complete(d, self._answers) for d in self.rubric.dimensions)

    def ensure_complete(self) -> None:
        missing = self.missing_questions()
        if missing:
            raise IncompleteEvaluationException(missing)


class EvaluationDraft(AnswerSheet):
    """
    Answer sheet plus the metadata needed to submit it.

    evaluation_id is set when the draft edits an existing record; a
    successful submit replaces that record wholesale.
    """

    def __init__(
        self,
        rubric: Rubric,
        project_id: str,
        evaluator_name: str = "",
        user_id: Optional[str] = None,
        answers: Optional[Mapping[str, Union[int, float]]] = None,
        evaluation_id: Optional[str] = None,
    ):
        super().__init__(rubric, answers)
        self.project_id = project_id
        self.evaluator_name = evaluator_name
        self.user_id = user_id
        self.evaluation_id = evaluation_id
        self.status = EvaluationStatus.DRAFT

    @property
    def is_edit(self) -> bool:
        return self.evaluation_id is not None
