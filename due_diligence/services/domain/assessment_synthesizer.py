"""
Domain service: cultural-resources risk determination.

Turns the tribal-land and NRHP lookups into the consultation requirement,
risk tier, Section 106 flag and recommended actions. Thresholds are strict
inequalities.
"""
from typing import Optional

from due_diligence.domain.models import (
    CulturalAssessment,
    NRHPResult,
    RiskLevel,
    TribalLandsResult,
)

ADJACENT_TRIBAL_MILES = 0.25
NEARBY_TRIBAL_MILES = 5.0
ADJACENT_NRHP_MILES = 0.1
ARMS_CHECK_NRHP_MILES = 0.25

DEGRADED_SOURCE = "Query failed - manual verification needed"

DEFAULT_ACTIONS = (
    "No cultural resource restrictions identified for this property",
    "Standard construction practices apply; stop work and contact NM HPD if artifacts are discovered",
)


def _consultation(tribal: TribalLandsResult) -> tuple[bool, str]:
    nearest = tribal.nearest

    if tribal.on_tribal_land:
        name = nearest.name if nearest else "tribal"
        return True, f"Property is located on {name} land - formal tribal consultation required"
    if nearest is not None and nearest.distance < ADJACENT_TRIBAL_MILES:
        return True, (f"Property is directly adjacent to {nearest.name} "
                      f"({nearest.distance:.2f} mi) - consultation recommended")
    if nearest is not None and nearest.distance < NEARBY_TRIBAL_MILES:
        return False, (f"Nearest tribal land: {nearest.name} ({nearest.distance:.1f} mi away) - "
                       f"consultation only required for federal undertakings")
    return False, "No tribal consultation anticipated for private development"


def _risk_level(tribal: TribalLandsResult, nrhp: NRHPResult) -> RiskLevel:
    if tribal.on_tribal_land or nrhp.in_district:
        return RiskLevel.HIGH
    if nrhp.nearest is not None and nrhp.nearest.distance < ADJACENT_NRHP_MILES:
        return RiskLevel.MODERATE
    if tribal.nearest is not None and tribal.nearest.distance < ADJACENT_TRIBAL_MILES:
        return RiskLevel.MODERATE
    return RiskLevel.LOW


def _recommended_actions(
    tribal: TribalLandsResult,
    nrhp: NRHPResult,
    consultation_required: bool,
) -> list[str]:
    actions = []

    if tribal.on_tribal_land:
        name = tribal.nearest.name if tribal.nearest else "the tribal"
        actions.append(f"Initiate formal consultation with {name} tribal government "
                       f"before any ground disturbance")
        actions.append("Phase I Archaeological Survey required before development")
    elif consultation_required and tribal.nearest is not None:
        actions.append(f"Consider contacting {tribal.nearest.name} THPO if project involves "
                       f"federal permits or funding")

    if nrhp.in_district:
        actions.append(f"Property is within {nrhp.district_name} Historic District - "
                       f"SHPO review required for exterior modifications")
        actions.append("Phase I Archaeological Survey likely required")

    if nrhp.nearest is not None and nrhp.nearest.distance < ARMS_CHECK_NRHP_MILES:
        actions.append("Consider ARMS records check due to nearby historic property")

    if not actions:
        actions.extend(DEFAULT_ACTIONS)

    return actions


def synthesize(
    tribal: TribalLandsResult,
    nrhp: NRHPResult,
    source: str,
    query_date: str,
) -> CulturalAssessment:
    """
    Build the cultural-resources assessment.

    Args:
        tribal: Tribal-land lookup result
        nrhp: NRHP lookup result (already capped to the nearest 10)
        source: Data sources that answered
        query_date: ISO date of the lookup

    Returns:
        CulturalAssessment
    """
    consultation_required, consultation_reason = _consultation(tribal)

    return CulturalAssessment(
        on_tribal_land=tribal.on_tribal_land,
        nearest_tribal_land=tribal.nearest,
        tribal_lands_within_5_miles=list(tribal.within_5_miles),
        tribal_consultation_required=consultation_required,
        tribal_consultation_reason=consultation_reason,
        in_historic_district=nrhp.in_district,
        historic_district_name=nrhp.district_name,
        nrhp_properties_within_1_mile=list(nrhp.properties),
        nearest_nrhp_property=nrhp.nearest,
        risk_level=_risk_level(tribal, nrhp),
        section_106_required=tribal.on_tribal_land or nrhp.in_district,
        recommended_actions=_recommended_actions(tribal, nrhp, consultation_required),
        source=source,
        query_date=query_date,
    )


def degraded_assessment(error: Optional[str], query_date: str) -> CulturalAssessment:
    """
    Conservative assessment returned when cultural-resources data is unavailable.

    Args:
        error: Description of the failure
        query_date: ISO date of the lookup

    Returns:
        CulturalAssessment flagged for manual verification
    """
    return CulturalAssessment(
        on_tribal_land=False,
        nearest_tribal_land=None,
        tribal_lands_within_5_miles=[],
        tribal_consultation_required=False,
        tribal_consultation_reason="Unable to query - manual review recommended",
        in_historic_district=False,
        historic_district_name=None,
        nrhp_properties_within_1_mile=[],
        nearest_nrhp_property=None,
        risk_level=RiskLevel.MODERATE,
        section_106_required=True,
        recommended_actions=["Request ARMS records check from NM HPD due to data query failure"],
        source=DEGRADED_SOURCE,
        query_date=query_date,
        error=error or "Cultural resources data unavailable",
    )
