"""
API response models using Pydantic.
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from due_diligence.domain.models import CulturalAssessment


class CulturalResourcesResponse(CulturalAssessment):
    """Response model for the cultural-resources endpoint."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "onTribalLand": False,
                "nearestTribalLand": {
                    "name": "Pueblo of Sandia",
                    "type": "Pueblo",
                    "distance": 3.42,
                    "landAreaName": "Pueblo of Sandia",
                },
                "tribalLandsWithin5Miles": [
                    {
                        "name": "Pueblo of Sandia",
                        "type": "Pueblo",
                        "distance": 3.42,
                        "landAreaName": "Pueblo of Sandia",
                    }
                ],
                "tribalConsultationRequired": False,
                "tribalConsultationReason": (
                    "Nearest tribal land: Pueblo of Sandia (3.4 mi away) - "
                    "consultation only required for federal undertakings"
                ),
                "inHistoricDistrict": False,
                "historicDistrictName": None,
                "nrhpPropertiesWithin1Mile": [],
                "nearestNRHPProperty": None,
                "riskLevel": "low",
                "section106Required": False,
                "recommendedActions": [
                    "No cultural resource restrictions identified for this property",
                    "Standard construction practices apply; stop work and contact NM HPD "
                    "if artifacts are discovered",
                ],
                "source": "BIA National LAR, NPS NRHP",
                "queryDate": "2025-01-15",
                "error": None,
            }
        }
    )


class ErrorResponse(BaseModel):
    """Error body returned for rejected requests."""
    error: str = Field(description="What was wrong with the request")
    detail: Optional[str] = None
