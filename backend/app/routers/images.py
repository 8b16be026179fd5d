"""Image router — destination photos for the trip plan."""

import logging

from fastapi import APIRouter, HTTPException, Query

from app.exceptions import ProviderError
from app.schemas.images import DestinationImage
from app.services.pexels_client import pexels_client

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=DestinationImage)
async def get_destination_image(query: str = Query(..., min_length=1)):
    try:
        return await pexels_client.search_image(query)
    except ProviderError as e:
        status = 404 if e.status_code == 404 else 502
        raise HTTPException(status_code=status, detail=str(e))
