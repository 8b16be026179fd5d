import pytest
from httpx import ASGITransport, AsyncClient

from app.exceptions import ProviderError, ValidationError
from app.main import app as api
from app.routers import images, recommendations
from app.schemas.images import DestinationImage
from app.schemas.recommendation import (
    CandidateDestination,
    DestinationEvidence,
    FlightOffer,
    HotelOffer,
    RoomOffer,
)


@pytest.fixture
async def api_client():
    async with AsyncClient(transport=ASGITransport(app=api), base_url="http://test") as ac:
        yield ac


class StubRecommendations:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error

    async def recommend(self, answers, question_context):
        if self.error:
            raise self.error
        return self.result


class StubAggregator:
    def __init__(self, evidence=None, error=None):
        self.evidence = evidence or []
        self.error = error

    async def aggregate(self, candidates):
        if self.error:
            raise self.error
        return self.evidence


class StubPexels:
    def __init__(self, image=None, error=None):
        self.image = image
        self.error = error

    async def search_image(self, query):
        if self.error:
            raise self.error
        return self.image


@pytest.mark.asyncio
async def test_health(api_client):
    response = await api_client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_recommendations_returns_plan(api_client, monkeypatch):
    plan = {"trip_plan": [{"recommended_destination": "Goa"}]}
    monkeypatch.setattr(recommendations, "recommendation_service", StubRecommendations(plan))

    response = await api_client.post(
        "/api/recommendations",
        json={"answers": {"budget": "mid"}, "questionContext": {}},
    )

    assert response.status_code == 200
    assert response.json() == plan


@pytest.mark.asyncio
async def test_recommendations_validation_error_maps_to_422(api_client, monkeypatch):
    monkeypatch.setattr(
        recommendations,
        "recommendation_service",
        StubRecommendations(error=ValidationError("Missing required value in candidate 0")),
    )

    response = await api_client.post("/api/recommendations", json={"answers": {}, "questionContext": {}})

    assert response.status_code == 422
    assert "candidate 0" in response.json()["detail"]


@pytest.mark.asyncio
async def test_recommendations_unexpected_error_maps_to_500(api_client, monkeypatch):
    monkeypatch.setattr(
        recommendations,
        "recommendation_service",
        StubRecommendations(error=RuntimeError("All LLM providers failed")),
    )

    response = await api_client.post("/api/recommendations", json={})

    assert response.status_code == 500


@pytest.mark.asyncio
async def test_evidence_endpoint_rejects_incomplete_candidate(api_client, monkeypatch):
    monkeypatch.setattr(
        recommendations, "pricing_aggregator", StubAggregator(error=ValidationError("bad candidate"))
    )

    response = await api_client.post("/api/recommendations/evidence", json={"candidates": [{}]})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_evidence_endpoint_returns_list(api_client, monkeypatch):
    monkeypatch.setattr(recommendations, "pricing_aggregator", StubAggregator())

    response = await api_client.post("/api/recommendations/evidence", json={"candidates": []})

    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_evidence_endpoint_serializes_destination_and_score(api_client, monkeypatch):
    candidate = CandidateDestination(
        destination="Goa",
        origin_city="DEL",
        destination_city="GOI",
        check_in_date="2026-12-01",
        check_out_date="2026-12-05",
        departure_date="2026-12-01",
        score=8.5,
    )
    evidence = DestinationEvidence(
        candidate=candidate,
        hotel_offers=[
            HotelOffer(
                hotel_id="H1",
                name="Sea View",
                rating=4.0,
                offers=[RoomOffer(total_price="9000.00", rooms_count=1, adults=1)],
            )
        ],
        flight_offers=[
            FlightOffer(
                origin="DEL",
                destination="GOI",
                departure_date="2026-12-01T06:00:00",
                adults=1,
                currency="INR",
                total_price="5400.00",
                duration="PT2H30M",
                direct_flight=True,
                layovers=0,
            )
        ],
    )
    monkeypatch.setattr(recommendations, "pricing_aggregator", StubAggregator([evidence]))

    response = await api_client.post(
        "/api/recommendations/evidence", json={"candidates": [candidate.model_dump(by_alias=True)]}
    )

    assert response.status_code == 200
    body = response.json()
    assert len(body) == 1
    assert body[0]["destination"] == "Goa"
    assert body[0]["score"] == 8.5
    assert body[0]["hotel_offers"][0]["hotel_id"] == "H1"
    assert body[0]["flight_offers"][0]["total_price"] == "5400.00"
    assert "candidate" not in body[0]


@pytest.mark.asyncio
async def test_image_lookup(api_client, monkeypatch):
    monkeypatch.setattr(
        images, "pexels_client", StubPexels(DestinationImage(url="https://img/goa.jpg", alt="Goa beach"))
    )

    response = await api_client.get("/api/images", params={"query": "Goa"})

    assert response.status_code == 200
    assert response.json() == {"url": "https://img/goa.jpg", "alt": "Goa beach"}


@pytest.mark.asyncio
async def test_image_not_found(api_client, monkeypatch):
    monkeypatch.setattr(
        images, "pexels_client", StubPexels(error=ProviderError("No images found", status_code=404))
    )

    response = await api_client.get("/api/images", params={"query": "Nowhere"})

    assert response.status_code == 404
