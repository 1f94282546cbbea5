"""
Domain models for cultural-resources data.

These models represent the core domain entities and should be independent
of any infrastructure concerns (API clients, databases, etc.).
Wire names are camelCase because the report renderer reads them directly.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RiskLevel(str, Enum):
    """Overall cultural-resources risk tier."""
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"


class TribalLandType(str, Enum):
    """Display category of a tribal land area."""
    PUEBLO = "Pueblo"
    RESERVATION = "Reservation"
    NAVAJO_NATION = "Navajo Nation"
    APACHE_RESERVATION = "Apache Reservation"
    TRIBAL_LAND = "Tribal Land"


class CamelModel(BaseModel):
    """Immutable model serialized with camelCase field names."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Coordinate(CamelModel):
    """WGS84 point."""
    lat: float = Field(ge=-90, le=90, description="Latitude in degrees")
    lng: float = Field(ge=-180, le=180, description="Longitude in degrees")


class Feature(BaseModel):
    """
    A single ArcGIS feature.

    Geometry is either a point ``{"x": lng, "y": lat}`` or a polygon
    ``{"rings": [[[lng, lat], ...], ...]}`` in WGS84.
    """
    attributes: dict[str, Any] = Field(default_factory=dict)
    geometry: Optional[dict[str, Any]] = None


class TribalLand(CamelModel):
    """Tribal land area near (or containing) a property."""
    name: str
    type: TribalLandType
    distance: float = Field(description="Miles to the nearest boundary vertex, 0 if containing")
    land_area_name: str


class HistoricPlace(CamelModel):
    """National Register of Historic Places listing."""
    name: str
    ref_number: str
    address: str
    city: str
    date_added: str
    resource_type: str
    distance: float = Field(description="Miles from the property")


class CulturalAssessment(CamelModel):
    """Cultural-resources determination for a property."""

    # Tribal lands
    on_tribal_land: bool
    nearest_tribal_land: Optional[TribalLand] = None
    tribal_lands_within_5_miles: list[TribalLand] = Field(default_factory=list)
    tribal_consultation_required: bool
    tribal_consultation_reason: str

    # Historic places
    in_historic_district: bool
    historic_district_name: Optional[str] = None
    nrhp_properties_within_1_mile: list[HistoricPlace] = Field(
        default_factory=list,
        alias="nrhpPropertiesWithin1Mile",
    )
    nearest_nrhp_property: Optional[HistoricPlace] = Field(
        default=None,
        alias="nearestNRHPProperty",
    )

    # Overall assessment
    risk_level: RiskLevel
    section_106_required: bool
    recommended_actions: list[str]

    source: str
    query_date: str
    error: Optional[str] = None


@dataclass
class TribalLandsResult:
    """Outcome of resolving tribal lands around a coordinate."""
    on_tribal_land: bool = False
    nearest: Optional[TribalLand] = None
    within_5_miles: list[TribalLand] = field(default_factory=list)
    available: bool = True
    source: Optional[str] = None

    @classmethod
    def empty(cls) -> "TribalLandsResult":
        """Fallback used when no tribal-land layer could be queried."""
        return cls(available=False)


@dataclass
class NRHPResult:
    """Outcome of resolving NRHP properties around a coordinate."""
    properties: list[HistoricPlace] = field(default_factory=list)
    in_district: bool = False
    district_name: Optional[str] = None
    available: bool = True
    source: Optional[str] = None

    @classmethod
    def empty(cls) -> "NRHPResult":
        """Fallback used when the NRHP layer could not be queried."""
        return cls(available=False)

    @property
    def nearest(self) -> Optional[HistoricPlace]:
        return self.properties[0] if self.properties else None
