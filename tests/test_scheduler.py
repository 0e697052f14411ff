"""Bölge tabloları ve depolar arası sıralama unit testleri."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from src.models.sync import Region, SyncWindow
from src.sync.regions import (
    estimate_sync_delay_ms,
    get_warehouse_region,
    is_within_business_hours,
    parse_region,
    regional_demand_factor,
    seasonal_multiplier,
)
from src.sync.scheduler import schedule_cross_warehouse_sync

# Ocak, 20:00 UTC: Los Angeles 12:00 (mesai), Tokyo 05:00, Berlin 21:00, Sidney 07:00
JANUARY_NOW = datetime(2025, 1, 15, 20, 0, tzinfo=timezone.utc)
JULY_NOW = datetime(2025, 7, 15, 20, 0, tzinfo=timezone.utc)


class TestRegions:
    """Depo -> bölge eşlemesi ve çalışma saatleri."""

    def test_known_warehouses(self):
        assert get_warehouse_region("japan-warehouse") is Region.JAPAN
        assert get_warehouse_region("australia-warehouse") is Region.AUSTRALIA

    def test_unknown_warehouse_defaults_to_us(self):
        assert get_warehouse_region("mars-warehouse") is Region.US

    def test_parse_region_case_insensitive(self):
        assert parse_region("japan") is Region.JAPAN
        assert parse_region("AUSTRALIA") is Region.AUSTRALIA
        assert parse_region("Mars") is None
        assert parse_region(None) is None

    def test_business_hours_boundaries(self):
        # Los Angeles 06:00 dahil, 18:00 hariç
        assert is_within_business_hours(Region.US, datetime(2025, 1, 15, 14, 0, tzinfo=timezone.utc))
        assert not is_within_business_hours(Region.US, datetime(2025, 1, 16, 2, 0, tzinfo=timezone.utc))

    def test_naive_moment_is_utc(self):
        assert is_within_business_hours(Region.JAPAN, datetime(2025, 1, 15, 1, 0))

    @pytest.mark.parametrize(
        "region,january,july",
        [
            (Region.US, 0.8, 1.2),
            (Region.EU, 0.8, 1.2),
            (Region.AUSTRALIA, 1.2, 0.8),
            (Region.JAPAN, 1.0, 1.0),
        ],
    )
    def test_seasonal_multiplier(self, region, january, july):
        assert seasonal_multiplier(region, JANUARY_NOW) == january
        assert seasonal_multiplier(region, JULY_NOW) == july

    def test_demand_factor(self):
        assert regional_demand_factor(Region.US, JULY_NOW) == pytest.approx(0.96)
        assert regional_demand_factor(Region.AUSTRALIA, JANUARY_NOW) == pytest.approx(0.6)

    def test_season_month_taken_from_utc(self):
        """Tokyo 1 Nisan 01:00 = UTC 31 Mart, sezon Mart'a göre hesaplanır."""
        tokyo_april = datetime(2025, 4, 1, 1, 0, tzinfo=ZoneInfo("Asia/Tokyo"))
        assert seasonal_multiplier(Region.US, tokyo_april) == 0.8
        assert regional_demand_factor(Region.US, tokyo_april) == pytest.approx(0.64)
        sydney_october = datetime(2025, 10, 1, 5, 0, tzinfo=ZoneInfo("Australia/Sydney"))
        assert seasonal_multiplier(Region.AUSTRALIA, sydney_october) == 0.8

    def test_delay_symmetric_base(self):
        # İki hedef de mesai dışında
        assert estimate_sync_delay_ms(Region.US, Region.JAPAN, JANUARY_NOW) == 300
        assert estimate_sync_delay_ms(Region.EU, Region.AUSTRALIA, JANUARY_NOW) == 525

    def test_delay_in_business_hours(self):
        assert estimate_sync_delay_ms(Region.JAPAN, Region.US, JANUARY_NOW) == 200
        assert estimate_sync_delay_ms(Region.US, Region.US, JANUARY_NOW) == 150

    def test_delay_bounds(self):
        for source in Region:
            for target in Region:
                delay = estimate_sync_delay_ms(source, target, JANUARY_NOW)
                assert 150 <= delay <= 525


class TestCrossWarehouseSchedule:
    """Hedef depo sıralaması."""

    def test_sorted_descending(self):
        entries = schedule_cross_warehouse_sync(
            "us-warehouse",
            ["eu-warehouse", "japan-warehouse", "australia-warehouse"],
            now=JANUARY_NOW,
        )
        scores = [e.priority_score for e in entries]
        assert scores == sorted(scores, reverse=True)
        assert len(entries) == 3

    def test_scores_and_windows(self):
        entries = schedule_cross_warehouse_sync(
            "us-warehouse", ["eu-warehouse", "japan-warehouse"], now=JANUARY_NOW
        )
        assert [e.warehouse_id for e in entries] == ["japan-warehouse", "eu-warehouse"]
        assert entries[0].priority_score == pytest.approx(56.0)
        assert entries[1].priority_score == pytest.approx(55.6)
        assert all(e.sync_window is SyncWindow.OFF_HOURS for e in entries)
        assert entries[0].estimated_delay_ms == 300
        assert entries[1].estimated_delay_ms == 225

    def test_same_region_in_business_hours_first(self):
        entries = schedule_cross_warehouse_sync(
            "us-warehouse", ["japan-warehouse", "us-warehouse"], now=JANUARY_NOW
        )
        top = entries[0]
        assert top.warehouse_id == "us-warehouse"
        assert top.priority_score == pytest.approx(106.4)
        assert top.sync_window is SyncWindow.BUSINESS_HOURS
        assert top.estimated_delay_ms == 150

    def test_equal_scores_keep_input_order(self):
        entries = schedule_cross_warehouse_sync(
            "us-warehouse", ["australia-warehouse", "japan-warehouse"], now=JANUARY_NOW
        )
        assert [e.warehouse_id for e in entries] == ["australia-warehouse", "japan-warehouse"]

    def test_unknown_target_scored_as_us(self):
        entries = schedule_cross_warehouse_sync("us-warehouse", ["mars-warehouse"], now=JANUARY_NOW)
        assert entries[0].region is Region.US
        assert entries[0].warehouse_id == "mars-warehouse"

    def test_empty_targets(self):
        assert schedule_cross_warehouse_sync("us-warehouse", [], now=JANUARY_NOW) == []
