from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, computed_field, field_validator

RequiredStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CandidateDestination(BaseModel):
    """A planner-suggested destination awaiting price validation.

    Field aliases match the keys the first planner pass emits.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    destination: RequiredStr
    origin_code: RequiredStr = Field(alias="origin_city")
    destination_code: RequiredStr = Field(alias="destination_city")
    check_in_date: RequiredStr
    check_out_date: RequiredStr
    departure_date: RequiredStr
    return_date: str | None = None
    travelers: int = Field(1, alias="numberOfTravelers")
    score: float | str | None = None

    @field_validator("travelers", mode="before")
    @classmethod
    def _default_travelers(cls, v: Any) -> int:
        try:
            count = int(v)
        except (TypeError, ValueError):
            return 1
        return count if count > 0 else 1


class RoomOffer(BaseModel):
    total_price: str
    rooms_count: int
    adults: int


class HotelOffer(BaseModel):
    hotel_id: str
    name: str
    rating: float | None = None
    offers: list[RoomOffer] = Field(default_factory=list)


class FlightOffer(BaseModel):
    origin: str
    destination: str
    departure_date: str
    return_date: str | None = None
    adults: int
    currency: str
    total_price: str
    duration: str
    direct_flight: bool
    layovers: int


class DestinationEvidence(BaseModel):
    """A candidate joined with its live hotel and flight pricing.

    Serializes as destination, score and the two offer lists; the full
    candidate stays available in Python but is left out of the output.
    """

    candidate: CandidateDestination = Field(exclude=True)
    hotel_offers: list[HotelOffer]
    flight_offers: list[FlightOffer]

    @computed_field
    @property
    def destination(self) -> str:
        return self.candidate.destination

    @computed_field
    @property
    def score(self) -> float | str | None:
        return self.candidate.score

    @property
    def is_complete(self) -> bool:
        return bool(self.hotel_offers) and bool(self.flight_offers)

    def to_planner_payload(self) -> dict:
        """Compact shape serialized into the second planner prompt."""
        return {
            "destination": self.destination,
            "score": self.score,
            "hotelPrices": {"data": [h.model_dump() for h in self.hotel_offers]},
            "flightPrices": {"data": [f.model_dump() for f in self.flight_offers]},
        }


# --- Request bodies ---

class RecommendationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    answers: dict[str, Any] = Field(default_factory=dict)
    question_context: dict[str, Any] = Field(default_factory=dict, alias="questionContext")


class EvidenceRequest(BaseModel):
    candidates: list[dict[str, Any]]
