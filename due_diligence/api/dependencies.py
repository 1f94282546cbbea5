"""
Dependency injection for FastAPI.
"""
from typing import Annotated, List
from fastapi import Depends

from due_diligence.config import settings
from due_diligence.domain.feature_service import FeatureService
from due_diligence.infrastructure.api_constants import NRHPFields, TribalLandFields
from due_diligence.infrastructure.external_api_client import (
    ArcGISClient,
    ArcGISFeatureLayer,
    get_api_client,
)
from due_diligence.infrastructure.static_feature_service import StaticFeatureLayer
from due_diligence.services.application.cultural_resources_service import CulturalResourcesService
from due_diligence.services.domain.nrhp_resolver import NRHPResolver
from due_diligence.services.domain.tribal_lands_resolver import TribalLandsResolver

BIA_SOURCE = "BIA National LAR"
CENSUS_SOURCE = "Census TIGER AIAN"
NRHP_SOURCE = "NPS NRHP"


def get_tribal_land_layers(
    api_client: Annotated[ArcGISClient, Depends(get_api_client)],
) -> List[FeatureService]:
    """
    Dependency factory for the tribal-land layers, in priority order.

    Args:
        api_client: ArcGIS client (injected)

    Returns:
        Feature layers to query
    """
    if settings.static_tribal_lands_path:
        return [StaticFeatureLayer.from_file(
            settings.static_tribal_lands_path,
            name=BIA_SOURCE,
            name_field=TribalLandFields.BIA_NAME,
        )]

    layers: List[FeatureService] = [
        ArcGISFeatureLayer(
            client=api_client,
            url=settings.bia_tribal_lands_url,
            name=BIA_SOURCE,
            name_field=TribalLandFields.BIA_NAME,
            out_fields=[TribalLandFields.BIA_ID, TribalLandFields.BIA_NAME],
        )
    ]
    if settings.census_tribal_lands_url:
        layers.append(ArcGISFeatureLayer(
            client=api_client,
            url=settings.census_tribal_lands_url,
            name=CENSUS_SOURCE,
            name_field=TribalLandFields.CENSUS_NAME,
            out_fields=[TribalLandFields.CENSUS_ID, TribalLandFields.CENSUS_NAME],
        ))
    return layers


def get_nrhp_layer(
    api_client: Annotated[ArcGISClient, Depends(get_api_client)],
) -> FeatureService:
    """
    Dependency factory for the NRHP layer.

    Args:
        api_client: ArcGIS client (injected)

    Returns:
        Feature layer to query
    """
    if settings.static_nrhp_path:
        return StaticFeatureLayer.from_file(
            settings.static_nrhp_path,
            name=NRHP_SOURCE,
            name_field=NRHPFields.NAME,
        )

    return ArcGISFeatureLayer(
        client=api_client,
        url=settings.nrhp_boundaries_url,
        name=NRHP_SOURCE,
        name_field=NRHPFields.NAME,
        out_fields=list(NRHPFields.ALL),
    )


def get_cultural_resources_service(
    tribal_layers: Annotated[List[FeatureService], Depends(get_tribal_land_layers)],
    nrhp_layer: Annotated[FeatureService, Depends(get_nrhp_layer)],
) -> CulturalResourcesService:
    """
    Dependency factory for CulturalResourcesService.

    Args:
        tribal_layers: Tribal-land layers (injected)
        nrhp_layer: NRHP layer (injected)

    Returns:
        CulturalResourcesService instance
    """
    return CulturalResourcesService(
        tribal_resolver=TribalLandsResolver(
            tribal_layers,
            search_radius_miles=settings.tribal_search_radius_miles,
        ),
        nrhp_resolver=NRHPResolver(
            nrhp_layer,
            search_radius_miles=settings.nrhp_search_radius_miles,
        ),
    )


# Type aliases for cleaner route signatures
CulturalResourcesServiceDep = Annotated[
    CulturalResourcesService, Depends(get_cultural_resources_service)
]
