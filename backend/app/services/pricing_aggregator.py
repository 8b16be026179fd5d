"""Pricing aggregator — fans out hotel + flight lookups per candidate destination."""

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from app.exceptions import ValidationError
from app.schemas.recommendation import CandidateDestination, DestinationEvidence
from app.services.flight_pricing import FlightPricingAdapter, flight_pricing
from app.services.hotel_pricing import HotelPricingAdapter, hotel_pricing

logger = logging.getLogger(__name__)


def validate_candidates(
    candidates: Sequence[CandidateDestination | dict[str, Any]],
) -> list[CandidateDestination]:
    """Validate every candidate up front; one bad entry fails the whole run."""
    if isinstance(candidates, (str, bytes, dict)) or not isinstance(candidates, Sequence):
        raise ValidationError("Candidate destinations must be a list")

    validated = []
    for idx, entry in enumerate(candidates):
        if isinstance(entry, CandidateDestination):
            validated.append(entry)
            continue
        try:
            validated.append(CandidateDestination.model_validate(entry))
        except PydanticValidationError as e:
            missing = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
            raise ValidationError(
                f"Missing required value in candidate {idx} ({missing or 'entry'}): {entry!r}"
            ) from e
    return validated


class PricingAggregator:
    """Joins each candidate destination with live hotel and flight pricing."""

    def __init__(
        self,
        hotels: HotelPricingAdapter | None = None,
        flights: FlightPricingAdapter | None = None,
    ):
        self._hotels = hotels or hotel_pricing
        self._flights = flights or flight_pricing

    async def aggregate(
        self,
        candidates: Sequence[CandidateDestination | dict[str, Any]],
    ) -> list[DestinationEvidence]:
        """Price all candidates concurrently and keep the fully priced ones.

        Candidates without both hotel and flight offers are dropped silently;
        survivors keep input order.

        Raises:
            ValidationError: a candidate lacks a required field. Raised
                before any provider call is made.
        """
        validated = validate_candidates(candidates)
        if not validated:
            return []

        results = await asyncio.gather(*(self._price_candidate(c) for c in validated))

        evidence = [r for r in results if r.is_complete]
        dropped = [r.destination for r in results if not r.is_complete]
        logger.info(
            f"Pricing aggregation: {len(validated)} candidates, {len(evidence)} priced"
            + (f", dropped {dropped}" if dropped else "")
        )
        return evidence

    async def _price_candidate(self, candidate: CandidateDestination) -> DestinationEvidence:
        logger.debug(
            f"Pricing {candidate.destination}: hotels in {candidate.destination_code} "
            f"{candidate.check_in_date}..{candidate.check_out_date}, flights "
            f"{candidate.origin_code}->{candidate.destination_code} on {candidate.departure_date} "
            f"x{candidate.travelers}"
        )
        hotels, flights = await asyncio.gather(
            self._hotels.fetch_hotels(
                candidate.destination_code,
                candidate.check_in_date,
                candidate.check_out_date,
                candidate.travelers,
            ),
            self._flights.fetch_flights(
                candidate.origin_code,
                candidate.destination_code,
                candidate.departure_date,
                candidate.travelers,
                return_date=candidate.return_date,
            ),
        )
        return DestinationEvidence(
            candidate=candidate,
            hotel_offers=hotels,
            flight_offers=flights,
        )


pricing_aggregator = PricingAggregator()
