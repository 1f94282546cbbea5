"""
Feature layer abstraction.

Resolvers talk to polygon layers only through this protocol so the
containment logic stays with the GIS service and tests can inject fixtures.
"""
import asyncio
from typing import Optional, Protocol

from due_diligence.domain.models import Coordinate, Feature


class FeatureService(Protocol):
    """A queryable layer of tribal-land or historic-place features."""

    name: str
    """Human-readable data source name reported in assessments."""

    name_field: str
    """Attribute holding the feature's display name."""

    async def contains_point(self, coordinate: Coordinate) -> Optional[Feature]:
        """Return the first feature containing the coordinate, if any."""
        ...

    async def within(self, coordinate: Coordinate, radius_miles: float) -> list[Feature]:
        """Return features intersecting a buffer around the coordinate."""
        ...


async def query_point_and_buffer(
    layer: FeatureService,
    coordinate: Coordinate,
    radius_miles: float,
) -> tuple[Optional[Feature], list[Feature]]:
    """
    Run the containment and buffer queries of a layer concurrently.

    Both queries are awaited to completion before any failure is raised, so
    no request is left in flight when the caller moves on.

    Args:
        layer: Layer to query
        coordinate: Property location
        radius_miles: Buffer radius

    Returns:
        (containing feature or None, features within the buffer)

    Raises:
        The first exception raised by either query
    """
    containing, nearby = await asyncio.gather(
        layer.contains_point(coordinate),
        layer.within(coordinate, radius_miles),
        return_exceptions=True,
    )
    for outcome in (containing, nearby):
        if isinstance(outcome, BaseException):
            raise outcome
    return containing, nearby
