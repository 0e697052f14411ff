"""Batch planlama unit testleri."""

from src.models.sync import ProductSyncRecord, SyncConfiguration, SyncPriority
from src.sync.batch_planner import (
    determine_batch_region,
    estimate_batch_duration_ms,
    plan_batches,
    record_priority,
)


def _record(index, **metadata):
    return ProductSyncRecord(product_id=f"p-{index}", quantity=1, metadata=metadata)


def _records(priorities):
    return [_record(i, priority=p) for i, p in enumerate(priorities)]


class TestBatchSizing:
    """Batch boyutu sınırı ve kayıt korunumu."""

    def test_25_records_batch_size_10(self):
        records = _records(["MEDIUM"] * 25)
        batches = plan_batches(records, SyncConfiguration(batch_size=10))
        assert [len(b) for b in batches] == [10, 10, 5]

    def test_no_batch_exceeds_size(self):
        records = _records(["HIGH", "MEDIUM", "LOW", "CRITICAL"] * 7)
        batches = plan_batches(records, SyncConfiguration(batch_size=3))
        assert all(1 <= len(b) <= 3 for b in batches)

    def test_every_record_appears_once(self):
        records = _records(["LOW", "CRITICAL", "MEDIUM", "HIGH", "MEDIUM", "LOW"] * 4)
        batches = plan_batches(records, SyncConfiguration(batch_size=4))
        planned = [p.product_id for b in batches for p in b.products]
        assert sorted(planned) == sorted(r.product_id for r in records)
        assert len(planned) == len(set(planned))

    def test_empty_input(self):
        assert plan_batches([], SyncConfiguration()) == []

    def test_batch_ids_unique(self):
        batches = plan_batches(_records(["LOW"] * 9), SyncConfiguration(batch_size=2))
        ids = [b.batch_id for b in batches]
        assert len(ids) == len(set(ids))
        assert all(i.startswith("batch_") for i in ids)


class TestPriorityOrdering:
    """Öncelik sıralaması ve öncelik sıçraması ile batch bölme."""

    def test_batches_in_descending_priority(self):
        records = _records(["LOW", "MEDIUM", "CRITICAL", "HIGH"])
        batches = plan_batches(records, SyncConfiguration(batch_size=10))
        weights = [b.priority.weight for b in batches]
        assert weights == sorted(weights, reverse=True)
        assert batches[0].priority == SyncPriority.CRITICAL

    def test_large_gap_splits_batch(self):
        records = _records(["MEDIUM", "CRITICAL"])
        batches = plan_batches(records, SyncConfiguration(batch_size=10))
        assert [b.priority for b in batches] == [SyncPriority.CRITICAL, SyncPriority.MEDIUM]

    def test_adjacent_priorities_share_batch(self):
        records = _records(["MEDIUM", "HIGH"])
        batches = plan_batches(records, SyncConfiguration(batch_size=10))
        assert len(batches) == 1
        assert batches[0].priority == SyncPriority.HIGH
        assert [p.product_id for p in batches[0].products] == ["p-1", "p-0"]

    def test_gap_measured_from_batch_priority(self):
        records = _records(["CRITICAL", "HIGH", "MEDIUM"])
        batches = plan_batches(records, SyncConfiguration(batch_size=10))
        assert [len(b) for b in batches] == [2, 1]
        assert batches[0].priority == SyncPriority.CRITICAL

    def test_stable_within_equal_priority(self):
        records = _records(["LOW"] * 5)
        batches = plan_batches(records, SyncConfiguration(batch_size=10))
        assert [p.product_id for p in batches[0].products] == [f"p-{i}" for i in range(5)]

    def test_missing_priority_defaults_to_medium(self):
        assert record_priority(_record(0), SyncConfiguration()) == SyncPriority.MEDIUM
        assert record_priority(_record(0, priority="bogus"), SyncConfiguration()) == SyncPriority.MEDIUM

    def test_priority_override_from_config(self):
        config = SyncConfiguration(priority_overrides={"p-3": SyncPriority.CRITICAL})
        records = _records(["LOW"] * 5)
        batches = plan_batches(records, config)
        assert batches[0].priority == SyncPriority.CRITICAL
        assert [p.product_id for p in batches[0].products] == ["p-3"]


class TestDurationAndRegion:

    def test_duration_simple(self):
        assert estimate_batch_duration_ms(_records(["LOW"] * 3)) == 800

    def test_duration_complex(self):
        products = [_record(0), _record(1, isComplex=True), _record(2)]
        assert estimate_batch_duration_ms(products) == 950

    def test_duration_complex_flag_must_be_true(self):
        products = [_record(0, isComplex="true")]
        assert estimate_batch_duration_ms(products) == 600

    def test_region_plurality(self):
        products = [_record(0, region="EU"), _record(1, region="US"), _record(2, region="US")]
        assert determine_batch_region(products) == "US"

    def test_region_tie_first_seen_wins(self):
        products = [_record(0, region="EU"), _record(1, region="US")]
        assert determine_batch_region(products) == "EU"

    def test_region_absent(self):
        assert determine_batch_region([_record(0)]) is None

    def test_planned_batch_carries_duration_and_region(self):
        records = [_record(0, region="Japan"), _record(1, region="Japan")]
        batch = plan_batches(records, SyncConfiguration())[0]
        assert batch.estimated_duration_ms == 700
        assert batch.region == "Japan"
