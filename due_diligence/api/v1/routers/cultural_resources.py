"""
API router for cultural-resources endpoints.
"""
from fastapi import APIRouter, Request

from due_diligence.api.dependencies import CulturalResourcesServiceDep
from due_diligence.api.v1.models.requests import CoordinateRequest
from due_diligence.api.v1.models.responses import CulturalResourcesResponse, ErrorResponse
from due_diligence.middleware.rate_limit import RATE_LIMIT, limiter


router = APIRouter(
    prefix="/cultural-resources",
    tags=["cultural-resources"],
)


@router.post(
    "",
    response_model=CulturalResourcesResponse,
    summary="Assess cultural resources for a property",
    description="""
    Determine tribal-land and historic-place exposure for a coordinate.

    This endpoint:
    1. Checks whether the point lies within BIA tribal land and lists tribal lands nearby
    2. Checks whether the point lies within an NRHP historic district and lists
       NRHP properties within one mile
    3. Derives the risk level, tribal consultation requirement, Section 106 flag
       and recommended actions

    Upstream GIS outages never fail the request: if no data source responds, a
    conservative `moderate` assessment flagged for manual verification is returned.
    """,
    responses={
        200: {"description": "Assessment (possibly degraded) for the coordinate"},
        400: {"description": "Missing or out-of-range coordinate", "model": ErrorResponse},
        429: {"description": "Rate limit exceeded"},
    },
)
@limiter.limit(RATE_LIMIT)
async def assess_cultural_resources(
    request: Request,
    payload: CoordinateRequest,
    service: CulturalResourcesServiceDep,
) -> CulturalResourcesResponse:
    """
    Assess cultural resources for a property.

    Args:
        request: Incoming request (used for rate limiting)
        payload: Validated coordinate
        service: Cultural resources service (injected dependency)

    Returns:
        CulturalResourcesResponse
    """
    # Delegate to service layer (no business logic here)
    assessment = await service.assess(payload.to_coordinate())
    return CulturalResourcesResponse(**assessment.model_dump())
