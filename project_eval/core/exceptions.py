"""
Custom Exceptions - Project Evaluation Platform
project_eval/core/exceptions.py

Custom exception classes for answer capture and repository operations.
"""

from typing import Dict, List, Optional, Sequence


class EvaluationException(Exception):
    """Base exception for answer capture and submission."""

    pass


class UnknownQuestionException(EvaluationException):
    """Question id does not exist in the rubric."""

    def __init__(self, question_id: str):
        self.question_id = question_id
        super().__init__(f"Question {question_id} is not part of the rubric")


class InvalidAnswerValueException(EvaluationException):
    """Answer value outside the domain of its question type."""

    def __init__(self, question_id: str, value: object, allowed: Sequence[int]):
        self.question_id = question_id
        self.value = value
        self.allowed = list(allowed)
        super().__init__(
            f"Invalid answer {value!r} for question {question_id}; "
            f"allowed values: {self.allowed}"
        )


class IncompleteEvaluationException(EvaluationException):
    """Submission attempted with unanswered questions."""

    def __init__(self, missing: Dict[str, List[str]]):
        self.missing = missing
        count = sum(len(ids) for ids in missing.values())
        super().__init__(
            f"Evaluation is incomplete: {count} unanswered question(s) "
            f"in {', '.join(missing)}"
        )


class MissingEvaluatorException(EvaluationException):
    """Submission attempted without an evaluator name."""

    def __init__(self, message: str = "Evaluator name is required"):
        self.message = message
        super().__init__(message)


class RepositoryException(Exception):
    """Base exception for repository operations."""

    pass


class EntityNotFoundException(RepositoryException):
    """Entity not found in the document store."""

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with ID {entity_id} not found")


class PersistenceFailureException(RepositoryException):
    """The document store rejected a create or update."""

    def __init__(
        self,
        message: str = "Failed to persist record",
        field_errors: Optional[Dict[str, str]] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message
        self.field_errors = field_errors or {}
        self.status_code = status_code
        super().__init__(message)


class DatabaseConnectionException(PersistenceFailureException):
    """Document store unreachable or timed out."""

    def __init__(self, message: str = "Document store connection failed"):
        super().__init__(message)
