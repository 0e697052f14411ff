"""Öncelik hesaplama unit testleri."""

from datetime import datetime, timezone

import pytest

from src.models.sync import InventoryItem, InventoryStatus, ProductSyncRecord, SyncPriority
from src.sync.priority import calculate_sync_priority, escalate

# 12:00 UTC: Tokyo 21:00 (mesai dışı), Los Angeles 04:00 (mesai dışı)
OFF_HOURS_NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)
# 20:00 UTC: Los Angeles 12:00 (mesai içi)
US_BUSINESS_NOW = datetime(2025, 1, 15, 20, 0, tzinfo=timezone.utc)


def _record(quantity=10, **metadata):
    return ProductSyncRecord(product_id="p-1", quantity=quantity, metadata=metadata)


def _inventory(status):
    return InventoryItem("p-1", "us-warehouse", status, OFF_HOURS_NOW)


class TestEscalation:
    """Öncelik sadece yükselir, asla düşmez."""

    @pytest.mark.parametrize("current", list(SyncPriority))
    @pytest.mark.parametrize("target", list(SyncPriority))
    def test_escalate_never_decreases(self, current, target):
        result = escalate(current, target)
        assert result.weight == max(current.weight, target.weight)
        assert result.weight >= current.weight

    def test_weights(self):
        assert [p.weight for p in SyncPriority] == [100, 75, 50, 25]


class TestCalculateSyncPriority:

    def test_default_is_medium(self):
        assert calculate_sync_priority(_record(), "Japan", now=OFF_HOURS_NOW) == SyncPriority.MEDIUM

    def test_out_of_stock_is_critical(self):
        record = _record(quantity=2000)
        priority = calculate_sync_priority(
            record, "Japan", _inventory(InventoryStatus.OUT_OF_STOCK), now=OFF_HOURS_NOW
        )
        assert priority == SyncPriority.CRITICAL

    def test_low_stock_is_high(self):
        priority = calculate_sync_priority(
            _record(), "Japan", _inventory(InventoryStatus.LOW_STOCK), now=OFF_HOURS_NOW
        )
        assert priority == SyncPriority.HIGH

    def test_in_stock_stays_medium(self):
        priority = calculate_sync_priority(
            _record(), "Japan", _inventory(InventoryStatus.IN_STOCK), now=OFF_HOURS_NOW
        )
        assert priority == SyncPriority.MEDIUM

    def test_flexvolt_15ah_is_high(self):
        record = _record(productType="FLEXVOLT_BATTERY", capacity="15Ah")
        assert calculate_sync_priority(record, "Japan", now=OFF_HOURS_NOW) == SyncPriority.HIGH

    def test_flexvolt_6ah_stays_medium(self):
        record = _record(productType="FLEXVOLT_BATTERY", capacity="6Ah")
        assert calculate_sync_priority(record, "Japan", now=OFF_HOURS_NOW) == SyncPriority.MEDIUM

    def test_business_hours_is_high(self):
        assert calculate_sync_priority(_record(), "US", now=US_BUSINESS_NOW) == SyncPriority.HIGH

    def test_other_region_off_hours(self):
        assert calculate_sync_priority(_record(), "Japan", now=US_BUSINESS_NOW) == SyncPriority.MEDIUM

    def test_unknown_region_skips_business_hours(self):
        assert calculate_sync_priority(_record(), "Mars", now=US_BUSINESS_NOW) == SyncPriority.MEDIUM

    def test_large_quantity_threshold(self):
        assert calculate_sync_priority(_record(1001), "Japan", now=OFF_HOURS_NOW) == SyncPriority.HIGH
        assert calculate_sync_priority(_record(1000), "Japan", now=OFF_HOURS_NOW) == SyncPriority.MEDIUM

    def test_rush_order_overrides(self):
        record = _record(isRushOrder=True)
        priority = calculate_sync_priority(
            record, "Japan", _inventory(InventoryStatus.IN_STOCK), now=OFF_HOURS_NOW
        )
        assert priority == SyncPriority.CRITICAL

    def test_rush_flag_must_be_true(self):
        record = _record(isRushOrder="yes")
        assert calculate_sync_priority(record, "Japan", now=OFF_HOURS_NOW) == SyncPriority.MEDIUM

    def test_deterministic(self):
        record = _record(quantity=1500, productType="FLEXVOLT_BATTERY", capacity="15Ah")
        results = {calculate_sync_priority(record, "EU", now=OFF_HOURS_NOW) for _ in range(5)}
        assert len(results) == 1
