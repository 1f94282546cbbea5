"""
Infrastructure layer: feature layer served from a local ArcGIS JSON file.

Used for offline runs and fixtures. Containment is evaluated locally with
shapely; proximity uses the same nearest-vertex distance the resolvers use,
so a feature is "within" a radius when its point or nearest vertex is.
"""
import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from due_diligence.domain.models import Coordinate, Feature
from due_diligence.infrastructure.external_api_client import (
    ExternalAPIError,
    FeatureSetResponse,
)
from due_diligence.utils.geo_distance import feature_distance
from due_diligence.utils.spatial_helpers import geometry_contains

logger = logging.getLogger(__name__)


@lru_cache(maxsize=16)
def load_feature_set(path: str) -> Tuple[Feature, ...]:
    """
    Read and parse an ArcGIS JSON feature set file, once per path.

    Args:
        path: File containing ``{"features": [...]}``

    Returns:
        The parsed features

    Raises:
        ExternalAPIError: If the file cannot be read or parsed
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        feature_set = FeatureSetResponse(**data)
    except (OSError, ValueError, TypeError) as e:
        raise ExternalAPIError(f"Could not load feature set {path}: {e}")

    logger.info(f"Loaded {len(feature_set.features)} features from {path}")
    return tuple(feature_set.features)


class StaticFeatureLayer:
    """In-memory feature layer."""

    def __init__(self, features: Sequence[Feature], name: str, name_field: str):
        self.features = features
        self.name = name
        self.name_field = name_field

    @classmethod
    def from_file(
        cls,
        path: Union[str, Path],
        name: str,
        name_field: str,
    ) -> "StaticFeatureLayer":
        """
        Load a layer from an ArcGIS JSON feature set file.

        Args:
            path: File containing ``{"features": [...]}``
            name: Data source name
            name_field: Attribute holding the display name

        Returns:
            StaticFeatureLayer instance

        Raises:
            ExternalAPIError: If the file cannot be read or parsed
        """
        return cls(load_feature_set(str(path)), name=name, name_field=name_field)

    async def contains_point(self, coordinate: Coordinate) -> Optional[Feature]:
        point = (coordinate.lng, coordinate.lat)
        for feature in self.features:
            if geometry_contains(point, feature.geometry):
                return Feature(attributes=feature.attributes)
        return None

    async def within(self, coordinate: Coordinate, radius_miles: float) -> List[Feature]:
        point = (coordinate.lng, coordinate.lat)
        matches = []
        for feature in self.features:
            if geometry_contains(point, feature.geometry):
                matches.append(feature)
                continue
            distance = feature_distance(coordinate, feature.geometry)
            if distance is not None and distance <= radius_miles:
                matches.append(feature)
        return matches
