"""
Queue HTTP endpoint tests (in-memory stores behind the FastAPI dependencies).
"""

import pytest
from fastapi.testclient import TestClient

import clinicqueue.app as app_module
from clinicqueue.api.deps import (
    get_journey_repository,
    get_queue_repository,
    get_transition_orchestrator,
)
from clinicqueue.application.use_cases.transition_queue_entry import TransitionOrchestrator
from clinicqueue.domain.enums.workflow import QueueStatus

from conftest import (
    BrokenQueueEntryRepository,
    InMemoryJourneyStepRepository,
    InMemoryQueueEntryRepository,
    RecordingNotificationService,
    make_entry,
)


class _FakeMongoClient:
    def close(self):
        pass


async def _fake_init_database(settings):
    return _FakeMongoClient()


@pytest.fixture
def stores():
    queue_repo = InMemoryQueueEntryRepository()
    journey_repo = InMemoryJourneyStepRepository()
    queue_repo.entries["q-1"] = make_entry()
    return queue_repo, journey_repo


@pytest.fixture
def client(monkeypatch, stores):
    """Test client wired to in-memory stores; lifespan runs without a database."""
    queue_repo, journey_repo = stores
    orchestrator = TransitionOrchestrator(
        queue_repo, journey_repo, notification_service=RecordingNotificationService()
    )
    monkeypatch.setattr(app_module, "init_database", _fake_init_database)
    app = app_module.app
    app.dependency_overrides[get_queue_repository] = lambda: queue_repo
    app.dependency_overrides[get_journey_repository] = lambda: journey_repo
    app.dependency_overrides[get_transition_orchestrator] = lambda: orchestrator
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_get_entry(client):
    response = client.get("/queue/q-1")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["entry"]["entry_id"] == "q-1"
    assert data["entry"]["status"] == "waiting"
    assert data["waiting_time"]["urgency"] in ("low", "medium", "high")
    assert data["waiting_time"]["formatted"].endswith("min")
    assert "call" in data["available_actions"]


def test_get_missing_entry(client):
    response = client.get("/queue/unknown")
    assert response.status_code == 404
    body = response.json()
    assert body["error"] == "NOT_FOUND"
    assert body["details"] == {"entry_id": "unknown"}


def test_call_then_journey(client, stores):
    queue_repo, _ = stores
    response = client.post(
        "/queue/q-1/actions/call",
        json={"actor_id": "nurse-1", "assigned_to": "doc-1", "expected_status": "waiting"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "call applied"
    assert body["data"]["entry"]["status"] == "called"
    assert body["data"]["entry"]["assigned_to"] == "doc-1"
    assert body["data"]["available_actions"] == ["start", "mark_no_show", "cancel"]
    assert queue_repo.entries["q-1"].status is QueueStatus.CALLED

    journey = client.get("/queue/q-1/journey").json()["data"]
    assert journey["status"] == "called"
    assert journey["consistent"] is True
    assert [s["step_type"] for s in journey["steps"]] == ["called"]
    assert journey["steps"][0]["performed_by"] == "nurse-1"


def test_invalid_action_is_unprocessable(client, stores):
    _, journey_repo = stores
    response = client.post("/queue/q-1/actions/complete", json={"actor_id": "doc-1"})
    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "INVALID_TRANSITION"
    assert body["details"] == {"current": "waiting", "target": "completed"}
    assert journey_repo.steps == []


def test_stale_expected_status_is_a_conflict(client, stores):
    _, journey_repo = stores
    response = client.post(
        "/queue/q-1/actions/start",
        json={"actor_id": "doc-1", "expected_status": "called"},
    )
    assert response.status_code == 409
    body = response.json()
    assert body["error"] == "CONCURRENCY_CONFLICT"
    assert body["details"]["id"] == "q-1"
    assert journey_repo.steps == []


def test_unknown_action_is_rejected(client):
    response = client.post("/queue/q-1/actions/teleport", json={})
    assert response.status_code == 422
    assert response.json()["error"] == "INVALID_INPUT"


def test_action_on_missing_entry(client):
    response = client.post("/queue/nope/actions/call", json={})
    assert response.status_code == 404


def test_request_id_is_echoed(client):
    response = client.get("/queue/q-1", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"
    assert response.json()["request_id"] == "req-123"


def test_store_outage_is_service_unavailable(monkeypatch):
    queue_repo = BrokenQueueEntryRepository()
    queue_repo.entries["q-1"] = make_entry()
    journey_repo = InMemoryJourneyStepRepository()
    orchestrator = TransitionOrchestrator(queue_repo, journey_repo)
    monkeypatch.setattr(app_module, "init_database", _fake_init_database)
    app = app_module.app
    app.dependency_overrides[get_queue_repository] = lambda: queue_repo
    app.dependency_overrides[get_journey_repository] = lambda: journey_repo
    app.dependency_overrides[get_transition_orchestrator] = lambda: orchestrator
    try:
        with TestClient(app) as client:
            response = client.post("/queue/q-1/actions/call", json={"actor_id": "doc-1"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 503
    assert response.json()["error"] == "PERSISTENCE_ERROR"


def test_list_clinic_queue(client, stores):
    queue_repo, _ = stores
    queue_repo.entries["q-2"] = make_entry("q-2", priority=1)
    queue_repo.entries["q-3"] = make_entry("q-3", status=QueueStatus.IN_CONSULTATION)
    queue_repo.entries["q-9"] = make_entry("q-9", structure_id="clinic-2")

    response = client.get("/queue", params={"structure_id": "clinic-1"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["structure_id"] == "clinic-1"
    assert [e["entry"]["entry_id"] for e in data["entries"]] == ["q-2", "q-1", "q-3"]
    assert data["entries"][0]["waiting_time"]["formatted"].endswith("min")
    assert "call" in data["entries"][0]["available_actions"]
    assert data["stats"]["waiting"] == 2
    assert data["stats"]["in_progress"] == 1
    assert data["stats"]["completed_today"] == 0
    assert data["stats"]["average_wait_minutes"] > 0


def test_list_clinic_queue_filters_by_status(client, stores):
    queue_repo, _ = stores
    queue_repo.entries["q-2"] = make_entry("q-2", status=QueueStatus.CALLED)

    response = client.get(
        "/queue", params=[("structure_id", "clinic-1"), ("status", "called"), ("status", "in_consultation")]
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert [e["entry"]["entry_id"] for e in data["entries"]] == ["q-2"]
    assert data["stats"]["waiting"] == 0
    assert data["stats"]["average_wait_minutes"] == 0


def test_list_clinic_queue_requires_structure(client):
    response = client.get("/queue")
    assert response.status_code == 422
    assert response.json()["error"] == "INVALID_INPUT"
