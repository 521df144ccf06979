# tests/test_evaluation_service.py

"""
Evaluation Service Tests - draft -> scored -> persisted lifecycle
"""

import pytest

from project_eval.core.exceptions import (
    DatabaseConnectionException,
    EntityNotFoundException,
    IncompleteEvaluationException,
    MissingEvaluatorException,
    PersistenceFailureException,
    UnknownQuestionException,
)
from project_eval.models.enumerations import EvaluationStatus


class TestSubmit:
    """Tests for EvaluationService.submit()."""

    def test_submit_new_draft(self, small_service, small_answers, fake_pocketbase):
        draft = small_service.new_draft("proj1", evaluator_name="Ana")
        for qid, value in small_answers.items():
            draft.record_answer(qid, value)

        evaluation = small_service.submit(draft)

        assert evaluation.status == EvaluationStatus.PERSISTED
        assert evaluation.dimension_scores == {"d1": 90.0, "d2": 20.0}
        assert evaluation.total_score == 55.0
        assert evaluation.rubric_version == "test-1"
        assert draft.status == EvaluationStatus.PERSISTED
        assert draft.evaluation_id == evaluation.id
        assert len(fake_pocketbase.records) == 1

    def test_incomplete_draft_not_written(self, small_service, fake_pocketbase):
        draft = small_service.new_draft("proj1", evaluator_name="Ana")
        draft.record_answer("q1", 100)
        with pytest.raises(IncompleteEvaluationException):
            small_service.submit(draft)
        assert fake_pocketbase.records == {}
        assert draft.status == EvaluationStatus.DRAFT

    def test_blank_evaluator_rejected(self, small_service, small_answers, fake_pocketbase):
        draft = small_service.new_draft("proj1", evaluator_name="   ")
        for qid, value in small_answers.items():
            draft.record_answer(qid, value)
        with pytest.raises(MissingEvaluatorException):
            small_service.submit(draft)
        assert fake_pocketbase.records == {}

    def test_rejected_write_leaves_draft_intact(self, small_service, small_answers, fake_pocketbase):
        draft = small_service.new_draft("proj1", evaluator_name="Ana")
        for qid, value in small_answers.items():
            draft.record_answer(qid, value)

        fake_pocketbase.reject_next = {
            "code": 400,
            "message": "Failed to create record.",
            "data": {"total_score": {"code": "validation_max", "message": "Must be no greater than 100."}},
        }
        with pytest.raises(PersistenceFailureException) as exc:
            small_service.submit(draft)

        assert exc.value.field_errors == {"total_score": "Must be no greater than 100."}
        assert draft.status == EvaluationStatus.DRAFT
        assert draft.evaluation_id is None
        assert draft.answers == small_answers

        # retry succeeds with the same draft
        evaluation = small_service.submit(draft)
        assert evaluation.total_score == 55.0

    def test_unreachable_store_leaves_draft_intact(self, small_service, small_answers, fake_pocketbase):
        draft = small_service.new_draft("proj1", evaluator_name="Ana")
        for qid, value in small_answers.items():
            draft.record_answer(qid, value)
        fake_pocketbase.unavailable = True

        with pytest.raises(DatabaseConnectionException):
            small_service.submit(draft)
        assert draft.status == EvaluationStatus.DRAFT
        assert draft.answers == small_answers

    def test_score_does_not_persist(self, small_service, small_answers, fake_pocketbase):
        draft = small_service.new_draft("proj1")
        for qid, value in small_answers.items():
            draft.record_answer(qid, value)
        assert small_service.score(draft).as_dict()["total_score"] == 55.0
        assert fake_pocketbase.records == {}


class TestEdit:
    """Tests for load_draft() / edit()."""

    def test_load_draft_preloads_answers(self, small_service, small_answers):
        created = small_service.create("proj1", "Ana", small_answers, user_id="u1")
        draft = small_service.load_draft(created.id)
        assert draft.is_edit is True
        assert draft.answers == small_answers
        assert draft.evaluator_name == "Ana"
        assert draft.user_id == "u1"
        assert draft.project_id == "proj1"

    def test_load_draft_drops_retired_questions(self, small_service, small_answers, fake_pocketbase):
        created = small_service.create("proj1", "Ana", small_answers)
        fake_pocketbase.records[created.id]["answers"]["retired_q"] = 60
        draft = small_service.load_draft(created.id)
        assert "retired_q" not in draft.answers

    def test_load_draft_missing(self, small_service):
        with pytest.raises(EntityNotFoundException):
            small_service.load_draft("gone")

    def test_edit_replaces_and_rescores(self, small_service, small_answers, fake_pocketbase):
        created = small_service.create("proj1", "Ana", small_answers)
        edited = small_service.edit(
            created.id, "Luis", {"q1": 100, "q2": 100, "q3": 100, "q4": 100}
        )
        assert edited.id == created.id
        assert edited.evaluator_name == "Luis"
        assert edited.total_score == 100.0
        assert len(fake_pocketbase.records) == 1

    def test_edit_with_partial_answers_fails(self, small_service, small_answers):
        created = small_service.create("proj1", "Ana", small_answers)
        with pytest.raises(IncompleteEvaluationException):
            small_service.edit(created.id, "Ana", {"q1": 0})
        assert small_service.get_evaluation(created.id).total_score == 55.0

    def test_edit_unknown_question(self, small_service, small_answers):
        created = small_service.create("proj1", "Ana", small_answers)
        with pytest.raises(UnknownQuestionException):
            small_service.edit(created.id, "Ana", dict(small_answers, q9=100))


class TestReads:
    """Tests for list / summary / delete."""

    def test_get_evaluation_status_retrieved(self, small_service, small_answers):
        created = small_service.create("proj1", "Ana", small_answers)
        loaded = small_service.get_evaluation(created.id)
        assert loaded.status == EvaluationStatus.RETRIEVED
        assert loaded.dimension_scores == created.dimension_scores

    def test_scores_returned_as_stored(self, small_service, small_answers, fake_pocketbase):
        created = small_service.create("proj1", "Ana", small_answers)
        fake_pocketbase.records[created.id]["total_score"] = 12.3
        assert small_service.get_evaluation(created.id).total_score == 12.3

    def test_summary_pages_through_all_records(self, small_service, small_answers):
        first = small_service.create("proj1", "Ana", small_answers)
        last = small_service.create("proj1", "Luis", {"q1": 100, "q2": 100, "q3": 100, "q4": 100})
        summary = small_service.summarize_project("proj1", page_size=1)
        assert summary.evaluation_count == 2
        assert summary.average_total_score == 77.5
        assert summary.average_dimension_scores == {"d1": 95.0, "d2": 60.0}
        assert summary.latest_evaluation_id == last.id
        assert first.id != last.id

    def test_summary_empty_project(self, small_service):
        summary = small_service.summarize_project("empty")
        assert summary.evaluation_count == 0
        assert summary.average_total_score is None

    def test_delete_twice(self, small_service, small_answers):
        created = small_service.create("proj1", "Ana", small_answers)
        small_service.delete_evaluation(created.id)
        with pytest.raises(EntityNotFoundException):
            small_service.delete_evaluation(created.id)
