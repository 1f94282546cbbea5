"""
Domain service: tribal-land containment and proximity.

Layers are tried in order; the first layer whose buffer query returns
features supplies the result. A layer that errors contributes nothing and
the next one is tried.
"""
import logging
from typing import Optional, Sequence

from due_diligence.domain.feature_service import FeatureService, query_point_and_buffer
from due_diligence.domain.models import (
    Coordinate,
    Feature,
    TribalLand,
    TribalLandType,
    TribalLandsResult,
)
from due_diligence.infrastructure.external_api_client import ExternalAPIError
from due_diligence.utils.geo_distance import feature_distance

logger = logging.getLogger(__name__)

WITHIN_RADIUS_MILES = 5.0

# Evaluated in order; first substring found in the lowercased name wins
TYPE_KEYWORDS: tuple[tuple[str, TribalLandType], ...] = (
    ("pueblo", TribalLandType.PUEBLO),
    ("reservation", TribalLandType.RESERVATION),
    ("navajo", TribalLandType.NAVAJO_NATION),
    ("apache", TribalLandType.APACHE_RESERVATION),
)


def classify_tribal_land(name: str) -> TribalLandType:
    """
    Categorize a tribal land area by its name.

    Args:
        name: Land area display name

    Returns:
        Matching TribalLandType, TRIBAL_LAND when nothing matches
    """
    lowered = name.lower()
    for keyword, land_type in TYPE_KEYWORDS:
        if keyword in lowered:
            return land_type
    return TribalLandType.TRIBAL_LAND


class TribalLandsResolver:
    """
    Resolves whether a coordinate lies on tribal land and which tribal lands
    are nearby.

    Never raises: upstream failures degrade to TribalLandsResult.empty().
    """

    def __init__(
        self,
        layers: Sequence[FeatureService],
        search_radius_miles: float = 50.0,
    ):
        """
        Initialize the resolver.

        Args:
            layers: Tribal-land layers in priority order
            search_radius_miles: Buffer radius for the proximity query
        """
        self.layers = list(layers)
        self.search_radius_miles = search_radius_miles

    async def resolve(self, coordinate: Coordinate) -> TribalLandsResult:
        """
        Resolve tribal lands around a coordinate.

        Args:
            coordinate: Property location

        Returns:
            TribalLandsResult, sorted nearest-first
        """
        answered: Optional[TribalLandsResult] = None

        for layer in self.layers:
            try:
                result = await self._query_layer(layer, coordinate)
            except ExternalAPIError as e:
                logger.warning(f"{layer.name} tribal land query failed: {e.message}")
                continue
            except Exception:
                logger.exception(f"Unexpected error querying {layer.name}")
                continue

            if result.nearest is not None:
                return result

            logger.info(f"No tribal lands returned by {layer.name}")
            answered = answered or result

        if answered is not None:
            return answered

        logger.warning("All tribal land sources failed; assuming not on tribal land")
        return TribalLandsResult.empty()

    async def _query_layer(
        self,
        layer: FeatureService,
        coordinate: Coordinate,
    ) -> TribalLandsResult:
        containing, nearby = await query_point_and_buffer(layer, coordinate, self.search_radius_miles)

        containing_name: Optional[str] = None
        if containing is not None:
            containing_name = self._feature_name(layer, containing)
            logger.info(f"Property is WITHIN tribal land: {containing_name}")

        lands: dict[str, TribalLand] = {}
        for feature in nearby:
            name = self._feature_name(layer, feature, default="Unknown")
            if name in lands:
                continue

            if name == containing_name:
                distance = 0.0
            else:
                distance = feature_distance(coordinate, feature.geometry)
                if distance is None:
                    logger.debug(f"Skipping {name}: no usable geometry")
                    continue

            lands[name] = self._build_land(name, distance)

        if containing_name is not None and containing_name not in lands:
            lands[containing_name] = self._build_land(containing_name, 0.0)

        # Containing land first among ties at distance 0
        ordered = sorted(
            lands.values(),
            key=lambda land: (land.distance, land.name != containing_name),
        )
        logger.info(f"Found {len(ordered)} tribal lands from {layer.name}")

        return TribalLandsResult(
            on_tribal_land=containing_name is not None,
            nearest=ordered[0] if ordered else None,
            within_5_miles=[land for land in ordered if land.distance <= WITHIN_RADIUS_MILES],
            source=layer.name,
        )

    @staticmethod
    def _feature_name(layer: FeatureService, feature: Feature, default: str = "Tribal Land") -> str:
        value = feature.attributes.get(layer.name_field)
        return str(value) if value else default

    @staticmethod
    def _build_land(name: str, distance: float) -> TribalLand:
        return TribalLand(
            name=name,
            type=classify_tribal_land(name),
            distance=distance,
            land_area_name=name,
        )
