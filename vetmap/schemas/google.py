"""
Response schemas for the Google Maps Platform web services.

Only the fields the gateway reads are declared; everything else in the
payload is ignored. A payload missing a required field fails validation and
is reported by the gateway as a malformed response.
"""
from pydantic import BaseModel, ConfigDict, Field

from vetmap.schemas.place import Coordinate, Place, SuggestionEntry

# Statuses meaning "the request worked"
SUCCESS_STATUS = "OK"
EMPTY_STATUS = "ZERO_RESULTS"


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class LatLng(_Payload):
    lat: float = Field(ge=-90.0, le=90.0, allow_inf_nan=False)
    lng: float = Field(ge=-180.0, le=180.0, allow_inf_nan=False)


class Geometry(_Payload):
    location: LatLng

    def to_coordinate(self) -> Coordinate:
        return Coordinate(latitude=self.location.lat, longitude=self.location.lng)


class NearbyResult(_Payload):
    place_id: str
    name: str
    geometry: Geometry
    vicinity: str = ""
    rating: float | None = None

    def to_place(self) -> Place:
        return Place(
            id=self.place_id,
            name=self.name,
            coordinate=self.geometry.to_coordinate(),
            address=self.vicinity,
            rating=self.rating,
        )


class NearbySearchResponse(_Payload):
    status: str
    results: list[NearbyResult] = Field(default_factory=list)
    error_message: str | None = None


class Prediction(_Payload):
    place_id: str
    description: str

    def to_suggestion(self) -> SuggestionEntry:
        return SuggestionEntry(id=self.place_id, description=self.description)


class AutocompleteResponse(_Payload):
    status: str
    predictions: list[Prediction] = Field(default_factory=list)
    error_message: str | None = None


class DetailsResult(_Payload):
    place_id: str
    name: str
    geometry: Geometry
    formatted_address: str = ""
    rating: float | None = None

    def to_place(self) -> Place:
        return Place(
            id=self.place_id,
            name=self.name,
            coordinate=self.geometry.to_coordinate(),
            address=self.formatted_address,
            rating=self.rating,
        )


class DetailsResponse(_Payload):
    status: str
    result: DetailsResult | None = None
    error_message: str | None = None


class GeocodeResult(_Payload):
    place_id: str
    formatted_address: str
    geometry: Geometry

    def to_place(self) -> Place:
        # Geocoder hits carry no display name; the address stands in for it.
        return Place(
            id=self.place_id,
            name=self.formatted_address,
            coordinate=self.geometry.to_coordinate(),
            address=self.formatted_address,
        )


class GeocodeResponse(_Payload):
    status: str
    results: list[GeocodeResult] = Field(default_factory=list)
    error_message: str | None = None
