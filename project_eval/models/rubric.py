from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator
from typing import Dict, List, Optional, Tuple

from project_eval.models.enumerations import ANSWER_DOMAINS, QuestionType


class Question(BaseModel):
    """
    Single rubric item, answered as boolean or likert.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        max_length=64,
        description="Question identifier, unique across the whole rubric"
    )

    text: str = Field(
        ...,
        min_length=1,
        description="Question shown to the evaluator"
    )

    type: QuestionType = Field(
        ...,
        description="Answer type (boolean, likert)"
    )

    @property
    def allowed_values(self) -> Tuple[int, ...]:
        return ANSWER_DOMAINS[self.type]


class Dimension(BaseModel):
    """
    Named category of questions contributing one sub-score.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(default="")
    questions: Tuple[Question, ...] = Field(
        ...,
        min_length=1,
        description="Ordered, non-empty question list"
    )

    @property
    def question_ids(self) -> List[str]:
        return [q.id for q in self.questions]


class Rubric(BaseModel):
    """
    Complete, static set of dimensions every evaluation is scored against.

    Built once at startup and injected wherever it is needed; question ids
    are flat keys of the answers map, so they must be unique across the
    whole rubric, not only within a dimension.
    """

    model_config = ConfigDict(frozen=True)

    version: str = Field(
        default="v1",
        min_length=1,
        description="Rubric version stored alongside every evaluation record"
    )

    dimensions: Tuple[Dimension, ...] = Field(..., min_length=1)

    _questions: Dict[str, Question] = PrivateAttr(default_factory=dict)
    _owners: Dict[str, str] = PrivateAttr(default_factory=dict)

    @field_validator("dimensions")
    @classmethod
    def validate_unique_ids(cls, dimensions: Tuple[Dimension, ...]) -> Tuple[Dimension, ...]:
        dimension_ids = [d.id for d in dimensions]
        if len(set(dimension_ids)) != len(dimension_ids):
            raise ValueError("Dimension ids must be unique")

        seen = set()
        for dimension in dimensions:
            for question in dimension.questions:
                if question.id in seen:
                    raise ValueError(f"Duplicate question id: {question.id}")
                seen.add(question.id)
        return dimensions

    def model_post_init(self, __context) -> None:
        for dimension in self.dimensions:
            for question in dimension.questions:
                self._questions[question.id] = question
                self._owners[question.id] = dimension.id

    @property
    def dimension_ids(self) -> List[str]:
        return [d.id for d in self.dimensions]

    @property
    def question_ids(self) -> List[str]:
        return list(self._questions)

    @property
    def question_count(self) -> int:
        return len(self._questions)

    def question(self, question_id: str) -> Optional[Question]:
        return self._questions.get(question_id)

    def dimension(self, dimension_id: str) -> Optional[Dimension]:
        for dimension in self.dimensions:
            if dimension.id == dimension_id:
                return dimension
        return None

    def dimension_of(self, question_id: str) -> Optional[str]:
        """Return the id of the dimension owning a question."""
        return self._owners.get(question_id)
