"""
Test helpers: coordinate math, feature builders and a fake feature layer.
"""
import asyncio
import math
from typing import Optional

from due_diligence.domain.models import Coordinate, Feature


ALBUQUERQUE = Coordinate(lat=35.0844, lng=-106.6504)
MILES_PER_DEGREE_LAT = 3959.0 * math.pi / 180


def lat_offset(miles: float) -> float:
    """Degrees of latitude spanning the given great-circle distance."""
    return miles / MILES_PER_DEGREE_LAT


def square_rings(center: Coordinate, half_size_deg: float) -> list[list[list[float]]]:
    """A closed square ring around a center, in [lng, lat] order."""
    lat, lng = center.lat, center.lng
    return [[
        [lng - half_size_deg, lat - half_size_deg],
        [lng + half_size_deg, lat - half_size_deg],
        [lng + half_size_deg, lat + half_size_deg],
        [lng - half_size_deg, lat + half_size_deg],
        [lng - half_size_deg, lat - half_size_deg],
    ]]


def vertex_at(point: Coordinate, miles_north: float) -> list[list[list[float]]]:
    """A small ring whose nearest vertex lies due north of the point."""
    lat = point.lat + lat_offset(miles_north)
    return [[
        [point.lng, lat],
        [point.lng + 0.05, lat + 0.05],
        [point.lng - 0.05, lat + 0.05],
        [point.lng, lat],
    ]]


def tribal_feature(name: str, rings=None, name_field: str = "LARName") -> Feature:
    geometry = {"rings": rings} if rings is not None else None
    return Feature(attributes={name_field: name, "LARID": 1}, geometry=geometry)


def nrhp_feature(
    name: str,
    geometry: Optional[dict] = None,
    resource_type: str = "Building",
    ref_number: str = "80002541",
) -> Feature:
    return Feature(
        attributes={
            "ResourceName": name,
            "RefNum": ref_number,
            "Address": "100 Old Town Plaza",
            "City": "Albuquerque",
            "DateAdded": "1980-05-02",
            "ResourceType": resource_type,
        },
        geometry=geometry,
    )


def nrhp_point(point: Coordinate, miles_north: float) -> dict:
    return {"x": point.lng, "y": point.lat + lat_offset(miles_north)}


class FakeFeatureLayer:
    """Feature layer returning canned features, or raising on demand."""

    def __init__(
        self,
        name: str = "Fake Layer",
        name_field: str = "LARName",
        containing: Optional[Feature] = None,
        nearby: Optional[list[Feature]] = None,
        error: Optional[Exception] = None,
        contains_error: Optional[Exception] = None,
        within_gate: Optional[asyncio.Event] = None,
        release_gate: Optional[asyncio.Event] = None,
        within_delay: float = 0.0,
    ):
        self.name = name
        self.name_field = name_field
        self.containing = containing
        self.nearby = nearby or []
        self.error = error
        self.contains_error = contains_error
        self.within_gate = within_gate
        self.release_gate = release_gate
        self.within_delay = within_delay
        self.within_finished = False
        self.contains_calls = 0
        self.within_calls: list[float] = []

    async def contains_point(self, coordinate: Coordinate) -> Optional[Feature]:
        self.contains_calls += 1
        if self.contains_error or self.error:
            raise self.contains_error or self.error
        return self.containing

    async def within(self, coordinate: Coordinate, radius_miles: float) -> list[Feature]:
        self.within_calls.append(radius_miles)
        if self.release_gate is not None:
            self.release_gate.set()
        if self.within_gate is not None:
            await self.within_gate.wait()
        if self.within_delay:
            await asyncio.sleep(self.within_delay)
        self.within_finished = True
        if self.error:
            raise self.error
        return list(self.nearby)
