# tests/conftest.py

"""
Pytest Fixtures - Shared test configurations for models, scoring, storage and APIs

PocketBase is replaced by an in-memory fake behind httpx.MockTransport;
Redis caching is disabled unless a test patches it in.
"""

import json
import os
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

os.environ.setdefault("CACHE_ENABLED", "false")
os.environ.setdefault("APP_ENV", "development")

import httpx
import pytest
from fastapi.testclient import TestClient

from project_eval.core.dependencies import get_evaluation_service
from project_eval.main import app
from project_eval.models.enumerations import QuestionType
from project_eval.models.rubric import Dimension, Question, Rubric
from project_eval.repositories.evaluation_repository import EvaluationRepository
from project_eval.scoring.criteria import build_default_rubric
from project_eval.services.evaluation_service import EvaluationService


# =============================================================================
# FAKE POCKETBASE
# =============================================================================

class FakePocketBase:
    """
    In-memory stand-in for the PocketBase records API of one collection.

    Set `reject_next` to an error body to fail the next write with HTTP 400,
    or `unavailable` to raise a connection error on every request.
    """

    def __init__(self, collection: str = "evaluations"):
        self.prefix = f"/api/collections/{collection}/records"
        self.records: Dict[str, dict] = {}
        self.requests = []
        self.reject_next: Optional[dict] = None
        self.unavailable = False
        self._counter = 0
        self._clock = datetime(2024, 5, 1, 10, 0, 0, tzinfo=timezone.utc)

    def _next_id(self) -> str:
        self._counter += 1
        return f"rec{self._counter:012d}"

    def _now(self) -> str:
        self._clock += timedelta(seconds=1)
        return self._clock.strftime("%Y-%m-%d %H:%M:%S.000Z")

    def _error(self, status_code: int, message: str, data: Optional[dict] = None) -> httpx.Response:
        return httpx.Response(status_code, json={"code": status_code, "message": message, "data": data or {}})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.unavailable:
            raise httpx.ConnectError("connection refused", request=request)

        path = request.url.path
        if path == "/api/health":
            return httpx.Response(200, json={"code": 200, "message": "API is healthy."})
        if not path.startswith(self.prefix):
            return self._error(404, "The requested resource wasn't found.")

        record_id = path[len(self.prefix):].strip("/")
        method = request.method

        if method in ("POST", "PATCH") and self.reject_next is not None:
            body, self.reject_next = self.reject_next, None
            return httpx.Response(400, json=body)

        if not record_id:
            if method == "POST":
                return self._create(json.loads(request.content))
            if method == "GET":
                return self._list(request.url.params)
            return self._error(405, "Method not allowed.")

        if record_id not in self.records:
            return self._error(404, "The requested resource wasn't found.")

        if method == "GET":
            return httpx.Response(200, json=self.records[record_id])
        if method == "PATCH":
            record = self.records[record_id]
            record.update(json.loads(request.content))
            record["updated"] = self._now()
            return httpx.Response(200, json=record)
        if method == "DELETE":
            del self.records[record_id]
            return httpx.Response(204)
        return self._error(405, "Method not allowed.")

    def _create(self, body: dict) -> httpx.Response:
        if not body.get("project"):
            return self._error(
                400,
                "Failed to create record.",
                {"project": {"code": "validation_required", "message": "Missing required value."}},
            )
        timestamp = self._now()
        record = {
            "id": self._next_id(),
            "collectionName": "evaluations",
            "created": timestamp,
            "updated": timestamp,
            **body,
        }
        self.records[record["id"]] = record
        return httpx.Response(200, json=record)

    def _list(self, params) -> httpx.Response:
        page = int(params.get("page", 1))
        per_page = int(params.get("perPage", 30))
        items = list(self.records.values())

        project_filter = params.get("filter", "")
        if project_filter.startswith("project = "):
            project_id = json.loads(project_filter[len("project = "):])
            items = [r for r in items if r.get("project") == project_id]

        if params.get("sort") == "-created":
            items.sort(key=lambda r: r["created"], reverse=True)

        total = len(items)
        start = (page - 1) * per_page
        return httpx.Response(200, json={
            "page": page,
            "perPage": per_page,
            "totalItems": total,
            "totalPages": (total + per_page - 1) // per_page,
            "items": items[start:start + per_page],
        })


@pytest.fixture
def fake_pocketbase():
    return FakePocketBase()


@pytest.fixture
def pocketbase_client(fake_pocketbase):
    client = httpx.Client(
        transport=httpx.MockTransport(fake_pocketbase.handler),
        base_url="http://pocketbase.test",
    )
    yield client
    client.close()


@pytest.fixture
def evaluation_repository(pocketbase_client):
    return EvaluationRepository(client=pocketbase_client, collection="evaluations")


# =============================================================================
# RUBRIC FIXTURES
# =============================================================================

@pytest.fixture
def small_rubric():
    """Two dimensions, each with one boolean and one likert question."""
    return Rubric(
        version="test-1",
        dimensions=(
            Dimension(
                id="d1",
                name="Dimension One",
                questions=(
                    Question(id="q1", text="Boolean one?", type=QuestionType.BOOLEAN),
                    Question(id="q2", text="Likert one?", type=QuestionType.LIKERT),
                ),
            ),
            Dimension(
                id="d2",
                name="Dimension Two",
                questions=(
                    Question(id="q3", text="Boolean two?", type=QuestionType.BOOLEAN),
                    Question(id="q4", text="Likert two?", type=QuestionType.LIKERT),
                ),
            ),
        ),
    )


@pytest.fixture
def small_answers():
    """Scores 90.0 and 20.0, total 55.0 against small_rubric."""
    return {"q1": 100, "q2": 80, "q3": 0, "q4": 40}


@pytest.fixture(scope="session")
def default_rubric():
    return build_default_rubric()


@pytest.fixture
def complete_answers(default_rubric):
    """Every question of the default rubric answered with its highest value."""
    return {q.id: max(q.allowed_values) for d in default_rubric.dimensions for q in d.questions}


# =============================================================================
# SERVICE / API FIXTURES
# =============================================================================

@pytest.fixture
def evaluation_service(evaluation_repository, default_rubric):
    return EvaluationService(evaluation_repository, default_rubric)


@pytest.fixture
def small_service(evaluation_repository, small_rubric):
    return EvaluationService(evaluation_repository, small_rubric)


@pytest.fixture
def client(evaluation_service):
    """TestClient with the evaluation service bound to the fake store."""
    app.dependency_overrides[get_evaluation_service] = lambda: evaluation_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def sample_project_id():
    return "proj_modernizacion01"
