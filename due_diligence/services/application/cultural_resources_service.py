"""
Application service: Orchestration layer for cultural-resources assessments.
"""
import asyncio
import logging
from datetime import date
from typing import Callable

from due_diligence.domain.models import Coordinate, CulturalAssessment
from due_diligence.services.domain.assessment_synthesizer import (
    degraded_assessment,
    synthesize,
)
from due_diligence.services.domain.nrhp_resolver import NRHPResolver
from due_diligence.services.domain.tribal_lands_resolver import TribalLandsResolver

logger = logging.getLogger(__name__)


class CulturalResourcesService:
    """
    Application service for cultural-resources assessments.

    Orchestrates the two resolvers and the synthesizer. Always returns an
    assessment: when no data source answers, or synthesis fails, the
    conservative degraded assessment is returned instead of an error.
    """

    def __init__(
        self,
        tribal_resolver: TribalLandsResolver,
        nrhp_resolver: NRHPResolver,
        today: Callable[[], date] = date.today,
    ):
        """
        Initialize the service with dependencies.

        Args:
            tribal_resolver: Tribal-land lookup
            nrhp_resolver: NRHP lookup
            today: Clock used for the assessment's query date
        """
        self.tribal_resolver = tribal_resolver
        self.nrhp_resolver = nrhp_resolver
        self.today = today

    async def assess(self, coordinate: Coordinate) -> CulturalAssessment:
        """
        Assess cultural-resources risk for a property.

        This method orchestrates:
        1. Resolving tribal lands and NRHP properties concurrently
        2. Falling back to a degraded assessment if neither source answered
        3. Synthesizing the risk determination

        Args:
            coordinate: Property location

        Returns:
            CulturalAssessment
        """
        query_date = self.today().isoformat()
        logger.info(f"Cultural resources lookup for: {coordinate.lat}, {coordinate.lng}")

        try:
            tribal, nrhp = await asyncio.gather(
                self.tribal_resolver.resolve(coordinate),
                self.nrhp_resolver.resolve(coordinate),
            )

            if not tribal.available and not nrhp.available:
                logger.error("No cultural resources source responded; returning degraded assessment")
                return degraded_assessment("All cultural resources data sources failed", query_date)

            sources = [s for s in (tribal.source, nrhp.source) if s]
            assessment = synthesize(tribal, nrhp, source=", ".join(sources), query_date=query_date)

        except Exception as e:
            logger.exception(f"Cultural resources assessment failed: {e}")
            return degraded_assessment(str(e), query_date)

        logger.info(f"Cultural resources assessment complete: {assessment.risk_level.value} risk, "
                    f"{len(assessment.tribal_lands_within_5_miles)} tribal lands within 5mi, "
                    f"{len(assessment.nrhp_properties_within_1_mile)} NRHP properties")
        return assessment
