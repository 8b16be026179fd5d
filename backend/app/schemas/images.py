from pydantic import BaseModel, Field

from app.schemas.amadeus import ProviderModel


class PhotoSource(ProviderModel):
    original: str = ""


class Photo(ProviderModel):
    src: PhotoSource = Field(default_factory=PhotoSource)
    alt: str = ""


class PhotoSearchResponse(ProviderModel):
    photos: list[Photo] = Field(default_factory=list)


class DestinationImage(BaseModel):
    url: str
    alt: str
