"""Flight pricing adapter — Amadeus flight offers normalized for the planner."""

import logging

from app.config import settings
from app.schemas.amadeus import FlightOffersResponse, Itinerary, RawFlightOffer
from app.schemas.recommendation import FlightOffer
from app.services.amadeus_client import AmadeusClient, amadeus_client

logger = logging.getLogger(__name__)

FLIGHT_OFFERS_PATH = "/v2/shopping/flight-offers"


def normalize_offer(offer: RawFlightOffer) -> FlightOffer:
    """Map one raw offer; absent nested fields become "" / 0."""
    outbound = offer.itineraries[0] if offer.itineraries else Itinerary()
    segments = outbound.segments or []

    return_date = None
    if len(offer.itineraries) > 1:
        inbound_segments = offer.itineraries[1].segments or []
        if inbound_segments:
            return_date = inbound_segments[0].departure.at or None

    # An absent or empty segment list counts as one segment for layovers
    segment_count = len(segments) or 1

    return FlightOffer(
        origin=segments[0].departure.iata_code if segments else "",
        destination=segments[-1].arrival.iata_code if segments else "",
        departure_date=segments[0].departure.at if segments else "",
        return_date=return_date,
        adults=1 if any(tp.traveler_type == "ADULT" for tp in offer.traveler_pricings) else 0,
        currency=offer.price.currency,
        total_price=offer.price.total,
        duration=outbound.duration,
        direct_flight=len(segments) == 1,
        layovers=segment_count - 1,
    )


class FlightPricingAdapter:
    """Fetches and normalizes flight offers for a route.

    Never raises: any failure degrades to an empty list.
    """

    def __init__(self, client: AmadeusClient | None = None, currency: str | None = None):
        self._client = client or amadeus_client
        self._currency = currency or settings.amadeus_currency

    async def fetch_flights(
        self,
        origin: str,
        destination: str,
        departure_date: str,
        adults: int = 1,
        return_date: str | None = None,
    ) -> list[FlightOffer]:
        try:
            params = {
                "originLocationCode": origin,
                "destinationLocationCode": destination,
                "departureDate": departure_date,
                "adults": adults,
                "currencyCode": self._currency,
            }
            if return_date:
                params["returnDate"] = return_date

            resp = await self._client.get(FLIGHT_OFFERS_PATH, FlightOffersResponse, params=params)
            return [
                normalize_offer(offer)
                for offer in resp.data[:settings.flight_result_limit]
            ]
        except Exception as e:
            logger.warning(f"Flight pricing failed for {origin}->{destination}, returning no offers: {e}")
            return []


flight_pricing = FlightPricingAdapter()
