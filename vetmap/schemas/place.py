from pydantic import BaseModel, ConfigDict, field_validator

from vetmap.core.validation import validate_latitude, validate_longitude


class Coordinate(BaseModel):
    """A latitude/longitude pair. Replaced wholesale, never mutated."""

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float

    @field_validator("latitude")
    @classmethod
    def check_latitude(cls, v: float) -> float:
        return validate_latitude(v)

    @field_validator("longitude")
    @classmethod
    def check_longitude(cls, v: float) -> float:
        return validate_longitude(v)

    def as_param(self) -> str:
        """Format as the ``lat,lng`` string the Places API expects."""
        return f"{self.latitude},{self.longitude}"


class Place(BaseModel):
    """A provider-identified point of interest. Identity is ``id``."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    coordinate: Coordinate
    address: str = ""
    rating: float | None = None

    def __eq__(self, other):
        if not isinstance(other, Place):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)


class SuggestionEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    description: str
