"""
API request models using Pydantic.
"""
import math
from typing import Any

from pydantic import BaseModel, Field, field_validator

from due_diligence.domain.models import Coordinate


def parse_coordinate(value: Any, label: str, minimum: float, maximum: float) -> float:
    """
    Validate a latitude or longitude supplied as a number or numeric string.

    Args:
        value: Raw input value
        label: "Latitude" or "Longitude"
        minimum: Lower bound (inclusive)
        maximum: Upper bound (inclusive)

    Returns:
        The coordinate as a float

    Raises:
        ValueError: With a user-facing message
    """
    if value is None:
        raise ValueError(f"{label} is required")

    if isinstance(value, bool):
        raise ValueError(f"{label} must be a valid number")
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise ValueError(f"{label} must be a valid number")
    elif isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            raise ValueError(f"{label} must be between {minimum:g} and {maximum:g}")
    else:
        raise ValueError(f"{label} must be a valid number")

    if math.isnan(number):
        raise ValueError(f"{label} must be a valid number")
    if number < minimum or number > maximum:
        raise ValueError(f"{label} must be between {minimum:g} and {maximum:g}")

    return number


class CoordinateRequest(BaseModel):
    """Request body for a cultural-resources lookup."""
    lat: Any = Field(
        default=None,
        validate_default=True,
        description="Latitude in degrees (-90 to 90)",
        examples=[35.0844],
    )
    lng: Any = Field(
        default=None,
        validate_default=True,
        description="Longitude in degrees (-180 to 180)",
        examples=[-106.6504],
    )

    @field_validator("lat", mode="before")
    @classmethod
    def validate_lat(cls, value: Any) -> float:
        return parse_coordinate(value, "Latitude", -90, 90)

    @field_validator("lng", mode="before")
    @classmethod
    def validate_lng(cls, value: Any) -> float:
        return parse_coordinate(value, "Longitude", -180, 180)

    def to_coordinate(self) -> Coordinate:
        return Coordinate(lat=self.lat, lng=self.lng)
