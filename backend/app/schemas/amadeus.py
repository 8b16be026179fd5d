"""Raw Amadeus payloads — only the fields the pricing adapters read.

Every field has a default so a missing or null value never raises; the
adapters work with typed attributes instead of probing nested dicts.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ProviderModel(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # null means "absent" so the field default applies
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


# --- Auth ---

class TokenResponse(ProviderModel):
    access_token: str
    expires_in: int = 1799


class ProviderErrorItem(ProviderModel):
    code: int | None = None
    title: str = ""
    detail: str = ""


class ProviderErrorBody(ProviderModel):
    errors: list[ProviderErrorItem] = Field(default_factory=list)


# --- Hotels ---

class HotelReference(ProviderModel):
    hotel_id: str = Field("", alias="hotelId")


class HotelListResponse(ProviderModel):
    data: list[HotelReference] = Field(default_factory=list)


class OfferPrice(ProviderModel):
    currency: str = ""
    total: str = ""


class OfferGuests(ProviderModel):
    adults: int | None = None

    @field_validator("adults", mode="before")
    @classmethod
    def _numeric_adults(cls, v: Any) -> Any:
        return v if isinstance(v, int) and not isinstance(v, bool) else None


class RawHotelOffer(ProviderModel):
    price: OfferPrice = Field(default_factory=OfferPrice)
    rooms: list[Any] | None = None
    room_quantity: int | None = Field(None, alias="roomQuantity")
    room: dict[str, Any] | None = None
    guests: OfferGuests = Field(default_factory=OfferGuests)

    @field_validator("rooms", mode="before")
    @classmethod
    def _rooms_list_only(cls, v: Any) -> Any:
        return v if isinstance(v, list) else None

    @field_validator("room_quantity", mode="before")
    @classmethod
    def _numeric_quantity(cls, v: Any) -> Any:
        if isinstance(v, bool):
            return None
        try:
            return int(v)
        except (TypeError, ValueError):
            return None

    @field_validator("room", mode="before")
    @classmethod
    def _room_object_only(cls, v: Any) -> Any:
        return v if isinstance(v, dict) else None

    @field_validator("guests", mode="before")
    @classmethod
    def _guests_object_only(cls, v: Any) -> Any:
        return v if isinstance(v, dict) else {}


class RawHotel(ProviderModel):
    hotel_id: str = Field("", alias="hotelId")
    name: str = ""
    rating: str | None = None


class RawHotelRecord(ProviderModel):
    hotel: RawHotel = Field(default_factory=RawHotel)
    offers: list[RawHotelOffer] = Field(default_factory=list)

    @field_validator("offers", mode="before")
    @classmethod
    def _offers_list_only(cls, v: Any) -> Any:
        return v if isinstance(v, list) else []


class HotelOffersResponse(ProviderModel):
    data: list[RawHotelRecord] = Field(default_factory=list)

    @field_validator("data", mode="before")
    @classmethod
    def _data_list_only(cls, v: Any) -> Any:
        return v if isinstance(v, list) else []


# --- Flights ---

class SegmentEndpoint(ProviderModel):
    iata_code: str = Field("", alias="iataCode")
    at: str = ""


class Segment(ProviderModel):
    departure: SegmentEndpoint = Field(default_factory=SegmentEndpoint)
    arrival: SegmentEndpoint = Field(default_factory=SegmentEndpoint)


class Itinerary(ProviderModel):
    duration: str = ""
    segments: list[Segment] | None = None


class TravelerPricing(ProviderModel):
    traveler_type: str = Field("", alias="travelerType")


class RawFlightOffer(ProviderModel):
    itineraries: list[Itinerary] = Field(default_factory=list)
    traveler_pricings: list[TravelerPricing] = Field(default_factory=list, alias="travelerPricings")
    price: OfferPrice = Field(default_factory=OfferPrice)


class FlightOffersResponse(ProviderModel):
    data: list[RawFlightOffer] = Field(default_factory=list)

    @field_validator("data", mode="before")
    @classmethod
    def _data_list_only(cls, v: Any) -> Any:
        return v if isinstance(v, list) else []

