"""Hotel pricing adapter — Amadeus hotel list + offers, ranked and trimmed."""

import logging
import math

from app.config import settings
from app.schemas.amadeus import HotelListResponse, HotelOffersResponse, RawHotelOffer, RawHotelRecord
from app.schemas.recommendation import HotelOffer, RoomOffer
from app.services.amadeus_client import AmadeusClient, amadeus_client

logger = logging.getLogger(__name__)

HOTEL_LIST_PATH = "/v1/reference-data/locations/hotels/by-city"
HOTEL_OFFERS_PATH = "/v3/shopping/hotel-offers"


def parse_rating(raw: str | None) -> float | None:
    """Parse a provider star rating.

    Absent or blank means unrated (None). A rating that is present but not
    numeric parses to NaN, which sorts as 0 and never meets a minimum.
    """
    if not raw or not raw.strip():
        return None
    try:
        return float(raw)
    except (TypeError, ValueError):
        return math.nan


def room_count(offer: RawHotelOffer) -> int:
    # rooms list > roomQuantity > single room object > 0
    if offer.rooms is not None:
        return len(offer.rooms)
    if offer.room_quantity:
        return offer.room_quantity
    if offer.room is not None:
        return 1
    return 0


def _sort_key(rating: float | None) -> float:
    if rating is None or math.isnan(rating):
        return 0.0
    return rating


def rank_hotels(
    records: list[RawHotelRecord],
    min_rating: float = 3.0,
    limit: int = 10,
) -> list[HotelOffer]:
    """Sort by rating (when any hotel is rated), drop low-rated, cap, normalize."""
    ratings = [parse_rating(r.hotel.rating) for r in records]
    ranked = list(zip(records, ratings))

    if any(rating is not None for rating in ratings):
        ranked.sort(key=lambda pair: _sort_key(pair[1]), reverse=True)

    kept = [(rec, rating) for rec, rating in ranked if rating is None or rating >= min_rating]

    return [
        HotelOffer(
            hotel_id=rec.hotel.hotel_id,
            name=rec.hotel.name,
            rating=rating,
            offers=[
                RoomOffer(
                    total_price=o.price.total,
                    rooms_count=room_count(o),
                    adults=o.guests.adults or 0,
                )
                for o in rec.offers
            ],
        )
        for rec, rating in kept[:limit]
    ]


class HotelPricingAdapter:
    """Fetches and normalizes hotel offers for a city.

    Never raises: any failure degrades to an empty list so one bad
    destination cannot abort a batch.
    """

    def __init__(self, client: AmadeusClient | None = None):
        self._client = client or amadeus_client

    async def fetch_hotels(
        self,
        city_code: str,
        check_in: str,
        check_out: str,
        adults: int = 1,
    ) -> list[HotelOffer]:
        try:
            if not check_in or not check_out:
                raise ValueError("check_in and check_out dates are required")

            listing = await self._client.get(
                HOTEL_LIST_PATH,
                HotelListResponse,
                params={"cityCode": city_code},
            )
            hotel_ids = [h.hotel_id for h in listing.data if h.hotel_id]
            if not hotel_ids:
                logger.info(f"No hotels listed for {city_code}")
                return []

            offers = await self._client.get(
                HOTEL_OFFERS_PATH,
                HotelOffersResponse,
                params={
                    "hotelIds": ",".join(hotel_ids[:settings.hotel_lookup_limit]),
                    "adults": adults,
                    "checkInDate": check_in,
                    "checkOutDate": check_out,
                },
            )
            return rank_hotels(
                offers.data,
                min_rating=settings.hotel_min_rating,
                limit=settings.hotel_result_limit,
            )
        except Exception as e:
            logger.warning(f"Hotel pricing failed for {city_code}, returning no offers: {e}")
            return []


hotel_pricing = HotelPricingAdapter()
