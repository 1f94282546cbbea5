"""
API endpoint constants and configuration.

This module contains all external ArcGIS layer endpoints and query constants.
Centralizing these values makes it easy to swap out layers or field names.
"""

METERS_PER_MILE = 1609.344


# ArcGIS layer query endpoints
class ArcGISLayers:
    """ArcGIS REST `query` endpoints for the cultural-resources layers."""

    BIA_AIAN_LAR = (
        "https://biamaps.geoplatform.gov/server/rest/services/DivLTR/"
        "BIA_AIAN_National_LAR/MapServer/0/query"
    )
    CENSUS_TIGER_AIAN = (
        "https://tigerweb.geo.census.gov/arcgis/rest/services/TIGERweb/"
        "tigerWMS_ACS2023/MapServer/36/query"
    )
    NPS_NRHP_BOUNDARIES = (
        "https://services1.arcgis.com/fBc8EJBxQRMcHlei/arcgis/rest/services/"
        "National_Register_of_Historic_Places_Boundaries/FeatureServer/0/query"
    )


# Attribute field names per layer
class TribalLandFields:
    """Identifier and display-name fields of the tribal-land layers."""

    BIA_ID = "LARID"
    BIA_NAME = "LARName"
    CENSUS_ID = "GEOID"
    CENSUS_NAME = "NAME"


class NRHPFields:
    """Attribute fields of the NRHP boundaries layer."""

    NAME = "ResourceName"
    REF_NUMBER = "RefNum"
    ADDRESS = "Address"
    CITY = "City"
    DATE_ADDED = "DateAdded"
    RESOURCE_TYPE = "ResourceType"

    ALL = (NAME, REF_NUMBER, ADDRESS, CITY, DATE_ADDED, RESOURCE_TYPE)


# ArcGIS query parameter constants
class ArcGISQuery:
    """Values for the ArcGIS `query` operation."""

    FORMAT_JSON = "json"
    GEOMETRY_POINT = "esriGeometryPoint"
    WGS84 = "4326"
    REL_WITHIN = "esriSpatialRelWithin"
    REL_INTERSECTS = "esriSpatialRelIntersects"
    UNITS_METER = "esriSRUnit_Meter"

    @classmethod
    def point(cls, lat: float, lng: float) -> str:
        """
        Format a point geometry parameter.

        Args:
            lat: Latitude in degrees
            lng: Longitude in degrees

        Returns:
            "x,y" string in longitude, latitude order
        """
        return f"{lng},{lat}"

    @classmethod
    def miles_to_meters(cls, miles: float) -> int:
        """Convert a buffer radius to whole meters."""
        return int(round(miles * METERS_PER_MILE))
