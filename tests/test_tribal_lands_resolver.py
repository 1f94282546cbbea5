"""
Unit tests for the tribal lands resolver.

Tests cover:
- Name-based type classification
- Containment and the zero-distance invariant
- Sorting, 5-mile filtering and de-duplication
- Source fallback and fail-open behaviour
"""
import pytest

from due_diligence.domain.models import TribalLandType
from due_diligence.services.domain.tribal_lands_resolver import (
    TribalLandsResolver,
    classify_tribal_land,
)

from helpers import FakeFeatureLayer, square_rings, tribal_feature, vertex_at


# ============================================================
# Classification Tests
# ============================================================

class TestClassification:
    """Tests for substring-based tribal land types."""

    @pytest.mark.parametrize("name,expected", [
        ("Pueblo of Isleta", TribalLandType.PUEBLO),
        ("SANDIA PUEBLO", TribalLandType.PUEBLO),
        ("Mescalero Reservation", TribalLandType.RESERVATION),
        ("Navajo Nation Off-Reservation Trust Land", TribalLandType.RESERVATION),
        ("Navajo Nation", TribalLandType.NAVAJO_NATION),
        ("Jicarilla Apache Nation", TribalLandType.APACHE_RESERVATION),
        ("Ute Mountain", TribalLandType.TRIBAL_LAND),
        ("", TribalLandType.TRIBAL_LAND),
    ])
    def test_classify(self, name, expected):
        """First matching keyword in fixed order decides the type."""
        assert classify_tribal_land(name) == expected

    def test_pueblo_wins_over_reservation(self):
        """Pueblo is checked before reservation."""
        assert classify_tribal_land("Pueblo Reservation") == TribalLandType.PUEBLO


# ============================================================
# Containment Tests
# ============================================================

class TestContainment:
    """Tests for on-tribal-land detection."""

    @pytest.mark.asyncio
    async def test_contained_point(self, point):
        """Containing feature is nearest with distance 0."""
        isleta = tribal_feature("Pueblo of Isleta", square_rings(point, 0.2))
        layer = FakeFeatureLayer(
            containing=isleta,
            nearby=[tribal_feature("Pueblo of Sandia", vertex_at(point, 3.0)), isleta],
        )

        result = await TribalLandsResolver([layer]).resolve(point)

        assert result.on_tribal_land is True
        assert result.nearest.name == "Pueblo of Isleta"
        assert result.nearest.distance == 0
        assert result.nearest.type == TribalLandType.PUEBLO
        assert [land.name for land in result.within_5_miles] == [
            "Pueblo of Isleta",
            "Pueblo of Sandia",
        ]

    @pytest.mark.asyncio
    async def test_containing_feature_missing_from_buffer(self, point):
        """The containing land is added even if the buffer query omits it."""
        layer = FakeFeatureLayer(
            containing=tribal_feature("Pueblo of Laguna"),
            nearby=[tribal_feature("Pueblo of Acoma", vertex_at(point, 4.0))],
        )

        result = await TribalLandsResolver([layer]).resolve(point)

        assert result.on_tribal_land is True
        assert result.nearest.name == "Pueblo of Laguna"
        assert result.nearest.distance == 0

    @pytest.mark.asyncio
    async def test_not_contained(self, point):
        layer = FakeFeatureLayer(nearby=[tribal_feature("Pueblo of Sandia", vertex_at(point, 3.0))])

        result = await TribalLandsResolver([layer]).resolve(point)

        assert result.on_tribal_land is False
        assert result.nearest.distance == pytest.approx(3.0)

    @pytest.mark.asyncio
    async def test_containing_land_wins_zero_distance_tie(self, point):
        """A neighbour with a vertex on the point never outranks the containing land."""
        isleta = tribal_feature("Pueblo of Isleta", square_rings(point, 0.2))
        layer = FakeFeatureLayer(
            containing=isleta,
            nearby=[tribal_feature("Pueblo of Sandia", vertex_at(point, 0.0)), isleta],
        )

        result = await TribalLandsResolver([layer]).resolve(point)

        assert result.nearest.name == "Pueblo of Isleta"
        assert [(land.name, land.distance) for land in result.within_5_miles] == [
            ("Pueblo of Isleta", 0.0),
            ("Pueblo of Sandia", 0.0),
        ]


# ============================================================
# Proximity Tests
# ============================================================

class TestProximity:
    """Tests for nearby tribal land enumeration."""

    @pytest.mark.asyncio
    async def test_sorted_and_filtered(self, point):
        """Lands are nearest-first; only those within 5 miles are listed."""
        layer = FakeFeatureLayer(nearby=[
            tribal_feature("Navajo Nation", vertex_at(point, 30.0)),
            tribal_feature("Pueblo of Santa Ana", vertex_at(point, 4.5)),
            tribal_feature("Pueblo of Sandia", vertex_at(point, 1.2)),
            tribal_feature("Jicarilla Apache Nation", vertex_at(point, 5.0)),
        ])

        result = await TribalLandsResolver([layer]).resolve(point)

        distances = [land.distance for land in result.within_5_miles]
        assert distances == sorted(distances)
        assert [land.name for land in result.within_5_miles][:2] == [
            "Pueblo of Sandia",
            "Pueblo of Santa Ana",
        ]
        assert "Navajo Nation" not in [land.name for land in result.within_5_miles]
        assert result.nearest.name == "Pueblo of Sandia"

    @pytest.mark.asyncio
    async def test_search_radius_passed_to_layer(self, point):
        layer = FakeFeatureLayer()

        await TribalLandsResolver([layer], search_radius_miles=50.0).resolve(point)

        assert layer.within_calls == [50.0]
        assert layer.contains_calls == 1

    @pytest.mark.asyncio
    async def test_duplicates_keep_first(self, point):
        layer = FakeFeatureLayer(nearby=[
            tribal_feature("Pueblo of Sandia", vertex_at(point, 2.0)),
            tribal_feature("Pueblo of Sandia", vertex_at(point, 0.5)),
        ])

        result = await TribalLandsResolver([layer]).resolve(point)

        assert len(result.within_5_miles) == 1
        assert result.nearest.distance == pytest.approx(2.0)

    @pytest.mark.asyncio
    async def test_feature_without_geometry_dropped(self, point):
        layer = FakeFeatureLayer(nearby=[
            tribal_feature("Mystery Land"),
            tribal_feature("Pueblo of Sandia", vertex_at(point, 2.0)),
        ])

        result = await TribalLandsResolver([layer]).resolve(point)

        assert [land.name for land in result.within_5_miles] == ["Pueblo of Sandia"]

    @pytest.mark.asyncio
    async def test_land_area_name_mirrors_name(self, point):
        layer = FakeFeatureLayer(nearby=[tribal_feature("Pueblo of Zia", vertex_at(point, 2.0))])

        result = await TribalLandsResolver([layer]).resolve(point)

        assert result.nearest.land_area_name == "Pueblo of Zia"


# ============================================================
# Fail-open Tests
# ============================================================

class TestFailOpen:
    """Tests for upstream failure handling."""

    @pytest.mark.asyncio
    async def test_all_sources_fail(self, point, upstream_error):
        """Every layer failing yields the empty, unavailable result."""
        layers = [FakeFeatureLayer(error=upstream_error), FakeFeatureLayer(error=upstream_error)]

        result = await TribalLandsResolver(layers).resolve(point)

        assert result.available is False
        assert result.on_tribal_land is False
        assert result.nearest is None
        assert result.within_5_miles == []

    @pytest.mark.asyncio
    async def test_contains_failure_fails_layer(self, point, upstream_error):
        """A failed containment query discards that layer's answer."""
        layer = FakeFeatureLayer(
            contains_error=upstream_error,
            nearby=[tribal_feature("Pueblo of Sandia", vertex_at(point, 2.0))],
        )

        result = await TribalLandsResolver([layer]).resolve(point)

        assert result.available is False
        assert result.nearest is None

    @pytest.mark.asyncio
    async def test_unexpected_error_is_swallowed(self, point):
        layer = FakeFeatureLayer(error=RuntimeError("boom"))

        result = await TribalLandsResolver([layer]).resolve(point)

        assert result.available is False

    @pytest.mark.asyncio
    async def test_falls_back_to_second_source(self, point, upstream_error):
        primary = FakeFeatureLayer(name="BIA National LAR", error=upstream_error)
        fallback = FakeFeatureLayer(
            name="Census TIGER AIAN",
            name_field="NAME",
            nearby=[tribal_feature("Pueblo of Sandia", vertex_at(point, 2.0), name_field="NAME")],
        )

        result = await TribalLandsResolver([primary, fallback]).resolve(point)

        assert result.available is True
        assert result.source == "Census TIGER AIAN"
        assert result.nearest.name == "Pueblo of Sandia"

    @pytest.mark.asyncio
    async def test_failed_layer_settles_before_fallback(self, point, upstream_error):
        """The buffer query of a failed layer completes before the next layer is tried."""
        primary = FakeFeatureLayer(name="BIA National LAR", contains_error=upstream_error, within_delay=0.05)
        fallback = FakeFeatureLayer(
            name="Census TIGER AIAN",
            nearby=[tribal_feature("Pueblo of Sandia", vertex_at(point, 2.0))],
        )

        result = await TribalLandsResolver([primary, fallback]).resolve(point)

        assert primary.within_finished is True
        assert result.source == "Census TIGER AIAN"

    @pytest.mark.asyncio
    async def test_empty_primary_tries_fallback(self, point):
        primary = FakeFeatureLayer(name="BIA National LAR")
        fallback = FakeFeatureLayer(
            name="Census TIGER AIAN",
            nearby=[tribal_feature("Pueblo of Sandia", vertex_at(point, 2.0))],
        )

        result = await TribalLandsResolver([primary, fallback]).resolve(point)

        assert result.source == "Census TIGER AIAN"

    @pytest.mark.asyncio
    async def test_first_source_with_data_wins(self, point):
        primary = FakeFeatureLayer(
            name="BIA National LAR",
            nearby=[tribal_feature("Pueblo of Sandia", vertex_at(point, 2.0))],
        )
        fallback = FakeFeatureLayer(name="Census TIGER AIAN")

        result = await TribalLandsResolver([primary, fallback]).resolve(point)

        assert result.source == "BIA National LAR"
        assert fallback.contains_calls == 0

    @pytest.mark.asyncio
    async def test_nothing_nearby_is_available(self, point):
        """A layer that answers with no features is data, not a failure."""
        result = await TribalLandsResolver([FakeFeatureLayer(name="BIA National LAR")]).resolve(point)

        assert result.available is True
        assert result.nearest is None
        assert result.source == "BIA National LAR"
