# tests/test_models.py

"""
Model Tests - rubric structure, request payloads and settings validation
"""

import pytest
from pydantic import ValidationError

from project_eval.config import Settings
from project_eval.models.enumerations import ANSWER_DOMAINS, QuestionType
from project_eval.models.evaluation import EvaluationResponse, EvaluationSubmit
from project_eval.models.rubric import Dimension, Question, Rubric
from project_eval.scoring.criteria import EVALUATION_DIMENSIONS, RUBRIC_VERSION


class TestRubricModel:
    """Tests for Rubric / Dimension / Question."""

    def test_lookup_by_question_id(self, small_rubric):
        assert small_rubric.question("q3").type == QuestionType.BOOLEAN
        assert small_rubric.dimension_of("q3") == "d2"
        assert small_rubric.question("missing") is None
        assert small_rubric.dimension("nope") is None

    def test_question_ids_in_rubric_order(self, small_rubric):
        assert small_rubric.question_ids == ["q1", "q2", "q3", "q4"]
        assert small_rubric.dimension_ids == ["d1", "d2"]
        assert small_rubric.question_count == 4

    def test_duplicate_question_id_across_dimensions_rejected(self):
        q = Question(id="dup", text="?", type=QuestionType.BOOLEAN)
        with pytest.raises(ValidationError):
            Rubric(dimensions=(
                Dimension(id="a", name="A", questions=(q,)),
                Dimension(id="b", name="B", questions=(q,)),
            ))

    def test_duplicate_dimension_id_rejected(self):
        with pytest.raises(ValidationError):
            Rubric(dimensions=(
                Dimension(id="a", name="A", questions=(Question(id="x", text="?", type="boolean"),)),
                Dimension(id="a", name="A2", questions=(Question(id="y", text="?", type="boolean"),)),
            ))

    def test_empty_dimension_rejected(self):
        with pytest.raises(ValidationError):
            Dimension(id="a", name="A", questions=())

    def test_empty_rubric_rejected(self):
        with pytest.raises(ValidationError):
            Rubric(dimensions=())

    def test_rubric_is_frozen(self, small_rubric):
        with pytest.raises(ValidationError):
            small_rubric.version = "v2"

    def test_allowed_values_follow_type(self):
        assert Question(id="b", text="?", type="boolean").allowed_values == (0, 100)
        assert Question(id="l", text="?", type="likert").allowed_values == (20, 40, 60, 80, 100)


class TestDefaultRubric:
    """Tests for the built-in municipal modernization rubric."""

    def test_six_dimensions_thirty_one_questions(self, default_rubric):
        assert len(default_rubric.dimensions) == 6
        assert default_rubric.question_count == 31
        assert default_rubric.version == RUBRIC_VERSION

    def test_dimension_order(self, default_rubric):
        assert default_rubric.dimension_ids == [d["id"] for d in EVALUATION_DIMENSIONS]

    def test_every_question_type_has_a_domain(self, default_rubric):
        for dimension in default_rubric.dimensions:
            for question in dimension.questions:
                assert question.type in ANSWER_DOMAINS


class TestEvaluationSubmit:
    """Tests for the submit payload."""

    def test_evaluator_name_stripped(self):
        payload = EvaluationSubmit(evaluator_name="  Ana  ", answers={})
        assert payload.evaluator_name == "Ana"

    def test_blank_evaluator_name_rejected(self):
        with pytest.raises(ValidationError):
            EvaluationSubmit(evaluator_name="   ", answers={})

    def test_answers_required(self):
        with pytest.raises(ValidationError):
            EvaluationSubmit(evaluator_name="Ana")

    def test_total_score_bounded(self):
        with pytest.raises(ValidationError):
            EvaluationResponse(id="x", project_id="p", total_score=100.5)


class TestSettings:
    """Tests for Settings validators."""

    def test_pocketbase_url_trailing_slash_removed(self):
        cfg = Settings(POCKETBASE_URL="http://pb.local:8090/")
        assert cfg.POCKETBASE_URL == "http://pb.local:8090"

    def test_pocketbase_url_requires_scheme(self):
        with pytest.raises(ValidationError):
            Settings(POCKETBASE_URL="pb.local:8090")

    def test_production_requires_token(self):
        with pytest.raises(ValidationError):
            Settings(APP_ENV="production", DEBUG=False, POCKETBASE_TOKEN=None)

    def test_production_rejects_debug(self):
        with pytest.raises(ValidationError):
            Settings(APP_ENV="production", DEBUG=True, POCKETBASE_TOKEN="secret")

    def test_production_with_token_accepted(self):
        cfg = Settings(APP_ENV="production", DEBUG=False, POCKETBASE_TOKEN="secret")
        assert cfg.POCKETBASE_TOKEN.get_secret_value() == "secret"
