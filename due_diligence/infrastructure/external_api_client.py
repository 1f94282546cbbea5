"""
Infrastructure layer: ArcGIS REST client with retry logic.
"""
import json
import logging
from typing import List, Dict, Any, Optional

import httpx
from pydantic import BaseModel, ValidationError
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from due_diligence.config import settings
from due_diligence.domain.models import Coordinate, Feature
from due_diligence.infrastructure.api_constants import ArcGISQuery

logger = logging.getLogger(__name__)


# Pydantic models for API responses
class FeatureSetResponse(BaseModel):
    """Response from an ArcGIS `query` operation."""
    features: List[Feature] = []


class ExternalAPIError(Exception):
    """Custom exception for external API errors."""

    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ArcGISClient:
    """
    Client for ArcGIS REST `query` endpoints.
    Implements retry logic with exponential backoff.
    """

    def __init__(self, timeout: Optional[float] = None):
        """Initialize the HTTP client with configuration."""
        self.timeout = timeout if timeout is not None else settings.arcgis_timeout
        self.client = httpx.AsyncClient(
            headers={"accept": "application/json"},
            timeout=self.timeout,
        )

    async def __aenter__(self) -> "ArcGISClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    @retry(
        stop=stop_after_attempt(settings.arcgis_max_retry_attempts),
        wait=wait_exponential(
            multiplier=settings.retry_backoff_multiplier,
            min=settings.retry_min_wait,
            max=settings.retry_max_wait,
        ),
        retry=retry_if_exception_type((httpx.HTTPStatusError, httpx.RequestError)),
        reraise=True,
    )
    async def _send(self, url: str, params: Dict[str, Any]) -> httpx.Response:
        """
        Issue a GET request, raising on server errors so they can be retried.

        Args:
            url: Layer query endpoint
            params: Query string parameters

        Returns:
            The HTTP response (2xx-4xx)
        """
        response = await self.client.get(url, params=params)
        if response.status_code >= 500:
            response.raise_for_status()
        return response

    async def _make_request(self, url: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Query a layer and decode its JSON body.

        Args:
            url: Layer query endpoint
            params: Query string parameters

        Returns:
            Response data as dictionary

        Raises:
            ExternalAPIError: On transport failure, non-2xx status, an HTML or
                non-JSON body, or an ArcGIS error payload
        """
        try:
            response = await self._send(url, params)
        except httpx.HTTPStatusError as e:
            raise ExternalAPIError(
                f"API request failed: {e.response.status_code} - {e.response.text[:200]}",
                status_code=e.response.status_code,
            )
        except httpx.RequestError as e:
            raise ExternalAPIError(f"API request error: {type(e).__name__}: {e}")

        if response.is_error:
            raise ExternalAPIError(
                f"API request failed: {response.status_code} - {response.text[:200]}",
                status_code=response.status_code,
            )

        text = response.text
        if text.lstrip().startswith("<"):
            raise ExternalAPIError("API returned HTML instead of JSON")

        try:
            data = json.loads(text)
        except ValueError:
            raise ExternalAPIError("API returned a non-JSON body")

        if not isinstance(data, dict):
            raise ExternalAPIError("API returned an unexpected JSON document")

        # ArcGIS reports query failures with HTTP 200 and an error object
        if "error" in data:
            error = data["error"] or {}
            message = error.get("message", "unknown error") if isinstance(error, dict) else str(error)
            raise ExternalAPIError(f"ArcGIS error: {message}")

        return data

    async def query_features(self, url: str, params: Dict[str, Any]) -> List[Feature]:
        """
        Run an ArcGIS `query` operation.

        Args:
            url: Layer query endpoint
            params: Query string parameters

        Returns:
            List of Feature instances

        Raises:
            ExternalAPIError: If the request fails or the feature set is malformed
        """
        logger.debug(f"ArcGIS query {params.get('spatialRel')} -> {url}")
        data = await self._make_request(url, params)
        try:
            response = FeatureSetResponse(**data)
        except ValidationError as e:
            raise ExternalAPIError(f"Malformed feature set: {e.error_count()} validation errors")
        return response.features


class ArcGISFeatureLayer:
    """
    Feature layer backed by an ArcGIS REST `query` endpoint.

    Containment uses `esriSpatialRelWithin` on the query point; proximity uses
    `esriSpatialRelIntersects` with a metric buffer.
    """

    def __init__(
        self,
        client: ArcGISClient,
        url: str,
        name: str,
        name_field: str,
        out_fields: List[str],
    ):
        self.client = client
        self.url = url
        self.name = name
        self.name_field = name_field
        self.out_fields = ",".join(out_fields)

    def _base_params(self, coordinate: Coordinate) -> Dict[str, Any]:
        return {
            "f": ArcGISQuery.FORMAT_JSON,
            "geometry": ArcGISQuery.point(coordinate.lat, coordinate.lng),
            "geometryType": ArcGISQuery.GEOMETRY_POINT,
            "inSR": ArcGISQuery.WGS84,
            "outFields": self.out_fields,
        }

    async def contains_point(self, coordinate: Coordinate) -> Optional[Feature]:
        """
        Find the feature containing a coordinate.

        Args:
            coordinate: Query point

        Returns:
            The first containing Feature, or None

        Raises:
            ExternalAPIError: If the query fails
        """
        params = self._base_params(coordinate)
        params.update({
            "spatialRel": ArcGISQuery.REL_WITHIN,
            "returnGeometry": "false",
        })
        features = await self.client.query_features(self.url, params)
        return features[0] if features else None

    async def within(self, coordinate: Coordinate, radius_miles: float) -> List[Feature]:
        """
        Find features intersecting a buffer around a coordinate.

        Args:
            coordinate: Query point
            radius_miles: Buffer radius in miles

        Returns:
            List of Features with WGS84 geometry

        Raises:
            ExternalAPIError: If the query fails
        """
        params = self._base_params(coordinate)
        params.update({
            "spatialRel": ArcGISQuery.REL_INTERSECTS,
            "distance": str(ArcGISQuery.miles_to_meters(radius_miles)),
            "units": ArcGISQuery.UNITS_METER,
            "returnGeometry": "true",
            "outSR": ArcGISQuery.WGS84,
        })
        return await self.client.query_features(self.url, params)


# Singleton instance
_api_client: Optional[ArcGISClient] = None


def get_api_client() -> ArcGISClient:
    """
    Get or create the singleton API client instance.

    Returns:
        ArcGISClient instance
    """
    global _api_client
    if _api_client is None:
        _api_client = ArcGISClient()
    return _api_client


async def close_api_client() -> None:
    """Close and discard the singleton client, if one was created."""
    global _api_client
    if _api_client is not None:
        await _api_client.close()
        _api_client = None
