import pytest
from fastapi.testclient import TestClient

from tripplanner.agents.trip_planner.errors import GenerationError, QUOTA_EXCEEDED_MESSAGE
from tripplanner.agents.trip_planner.gemini_client import GeminiItineraryGenerator
from tripplanner.api import trips
from tripplanner.api.auth import get_current_user
from tripplanner.api.deps import get_generator, get_itinerary_store
from tripplanner.api.main import app

from conftest import FakeGenerator

USER = {"id": "user-1", "username": "ada", "name": "Ada", "email": "ada@example.com",
        "created_at": "2024-01-01T00:00:00"}

TRIP = {
    "destination": "Paris",
    "start_date": "2024-06-01",
    "number_of_days": 5,
    "budget": "$1200",
    "interests": ["Food & Dining", "Adventure"],
    "pace": "Moderate",
}


@pytest.fixture
def client(store, generator):
    app.dependency_overrides[get_current_user] = lambda: USER
    app.dependency_overrides[get_itinerary_store] = lambda: store
    app.dependency_overrides[get_generator] = lambda: generator
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health():
    assert TestClient(app).get("/health").json() == {"status": "ok"}


def test_options_lists_fixed_choices(client):
    body = client.get("/api/trips/options").json()
    assert body["paces"] == ["Relaxed", "Moderate", "Fast-paced"]
    assert body["interests"][0] == "Culture & History"
    assert "Train" in body["transportation_preferences"]


def test_dates_endpoint_reconciles_after_edit(client):
    res = client.post("/api/trips/dates", json={
        "start_date": "2024-06-01", "number_of_days": 3, "end_date": "2024-06-10", "edited": "number_of_days",
    })
    assert res.status_code == 200
    assert res.json() == {"start_date": "2024-06-01", "number_of_days": 3, "end_date": "2024-06-03"}

    res = client.post("/api/trips/dates", json={
        "start_date": "2024-06-01", "number_of_days": 3, "end_date": "2024-06-10", "edited": "end_date",
    })
    assert res.json()["number_of_days"] == 10


def test_prompt_preview(client):
    res = client.post("/api/trips/prompt", json={"destination": "Paris"})
    assert res.status_code == 200
    assert "Please specify dates or number of days." in res.json()["prompt"]


def test_submit_then_list_and_view(client, generator):
    res = client.post("/api/trips", json=TRIP)
    assert res.status_code == 201
    trip = res.json()
    assert trip["user_id"] == "user-1"
    assert trip["end_date"] == "2024-06-05"
    assert trip["itinerary"] == generator.text
    assert "interested in: Food & Dining, Adventure." in generator.prompts[0]

    listed = client.get("/api/trips").json()
    assert [t["id"] for t in listed] == [trip["id"]]

    detail = client.get(f"/api/trips/{trip['id']}")
    assert detail.status_code == 200
    assert detail.json()["destination"] == "Paris"


def test_submit_without_budget_is_rejected_before_generation(client, generator, collection):
    res = client.post("/api/trips", json={**TRIP, "budget": ""})
    assert res.status_code == 422
    assert "budget" in res.json()["detail"]
    assert generator.prompts == []
    assert collection.docs == []


def test_submit_quota_failure(client, collection):
    app.dependency_overrides[get_generator] = lambda: FakeGenerator(error=GenerationError("quota exceeded"))
    res = client.post("/api/trips", json=TRIP)
    assert res.status_code == 429
    assert res.json()["detail"] == QUOTA_EXCEEDED_MESSAGE
    assert collection.docs == []


def test_submit_without_api_key_is_a_configuration_error(client):
    app.dependency_overrides[get_generator] = lambda: GeminiItineraryGenerator(api_key=None)
    res = client.post("/api/trips", json=TRIP)
    assert res.status_code == 503
    assert res.json()["detail"] == "Error: Gemini API Key not configured."


def test_duplicate_submission_while_in_flight(client, generator):
    trips._in_flight.add("user-1")
    try:
        res = client.post("/api/trips", json=TRIP)
    finally:
        trips._in_flight.discard("user-1")
    assert res.status_code == 409
    assert generator.prompts == []


def test_unknown_trip_is_404(client):
    assert client.get("/api/trips/000000000000000000000000").status_code == 404


def test_trips_require_authentication(store):
    app.dependency_overrides[get_itinerary_store] = lambda: store
    try:
        res = TestClient(app).get("/api/trips")
    finally:
        app.dependency_overrides.clear()
    assert res.status_code == 401
