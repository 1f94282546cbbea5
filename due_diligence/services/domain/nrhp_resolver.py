"""
Domain service: National Register of Historic Places lookup.
"""
import logging
from typing import Optional

from due_diligence.domain.feature_service import FeatureService, query_point_and_buffer
from due_diligence.domain.models import (
    Coordinate,
    Feature,
    HistoricPlace,
    NRHPResult,
)
from due_diligence.infrastructure.api_constants import NRHPFields
from due_diligence.infrastructure.external_api_client import ExternalAPIError
from due_diligence.utils.geo_distance import feature_distance

logger = logging.getLogger(__name__)

MAX_PROPERTIES = 10
DEFAULT_DISTANCE_MILES = 1.0


class NRHPResolver:
    """
    Resolves historic-district containment and nearby NRHP listings.

    Never raises: upstream failures degrade to NRHPResult.empty().
    """

    def __init__(self, layer: FeatureService, search_radius_miles: float = 1.0):
        self.layer = layer
        self.search_radius_miles = search_radius_miles

    async def resolve(self, coordinate: Coordinate) -> NRHPResult:
        """
        Resolve NRHP properties around a coordinate.

        Args:
            coordinate: Property location

        Returns:
            NRHPResult with at most 10 properties, nearest first
        """
        try:
            containing, nearby = await query_point_and_buffer(
                self.layer, coordinate, self.search_radius_miles
            )
        except ExternalAPIError as e:
            logger.warning(f"{self.layer.name} query failed: {e.message}")
            return NRHPResult.empty()
        except Exception:
            logger.exception(f"Unexpected error querying {self.layer.name}")
            return NRHPResult.empty()

        district_name = self._district_name(containing)
        if district_name is not None:
            logger.info(f"Property is within historic district: {district_name}")

        properties = sorted(
            (self._build_place(coordinate, feature) for feature in nearby),
            key=lambda place: place.distance,
        )
        logger.info(f"Found {len(properties)} NRHP properties within "
                    f"{self.search_radius_miles} mi")

        return NRHPResult(
            properties=properties[:MAX_PROPERTIES],
            in_district=district_name is not None,
            district_name=district_name,
            source=self.layer.name,
        )

    @staticmethod
    def _district_name(feature: Optional[Feature]) -> Optional[str]:
        if feature is None:
            return None
        resource_type = feature.attributes.get(NRHPFields.RESOURCE_TYPE) or ""
        if "district" not in str(resource_type).lower():
            return None
        return str(feature.attributes.get(NRHPFields.NAME) or "Unnamed")

    @staticmethod
    def _build_place(coordinate: Coordinate, feature: Feature) -> HistoricPlace:
        attrs = feature.attributes
        distance = feature_distance(coordinate, feature.geometry, default=DEFAULT_DISTANCE_MILES)

        return HistoricPlace(
            name=str(attrs.get(NRHPFields.NAME) or "Unknown Property"),
            ref_number=str(attrs.get(NRHPFields.REF_NUMBER) or "N/A"),
            address=str(attrs.get(NRHPFields.ADDRESS) or ""),
            city=str(attrs.get(NRHPFields.CITY) or ""),
            date_added=str(attrs.get(NRHPFields.DATE_ADDED) or ""),
            resource_type=str(attrs.get(NRHPFields.RESOURCE_TYPE) or "Historic"),
            distance=distance,
        )
