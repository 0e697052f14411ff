"""Depo senkronizasyonu koordinasyonu.

Validasyon -> önceliklendirme -> batch planlama -> depolar arası sıralama
adımlarını tek bir plan altında toplar. Ağ çağrısı yapmaz, hiçbir şey
kaydetmez; stok durumu sadece enjekte edilen lookup fonksiyonu ile okunur.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional

from src.models.sync import (
    InventoryItem,
    ProductSyncRecord,
    SyncConfiguration,
    SyncPlan,
    SyncPriority,
    SyncStatus,
)
from src.sync.batch_planner import plan_batches
from src.sync.priority import calculate_sync_priority, escalate
from src.sync.regions import WAREHOUSE_IDS, get_warehouse_region, utc_now
from src.sync.scheduler import schedule_cross_warehouse_sync
from src.sync.validator import RecordInput, validate_sync_records

logger = logging.getLogger(__name__)

InventoryLookup = Callable[[str, str], Optional[InventoryItem]]

BULK_SYNC_INTERVALS = {
    "SYNC_CRITICAL": timedelta(minutes=30),
    "SYNC_DELTA": timedelta(hours=2),
    "SYNC_ALL": timedelta(hours=24),
}
DEFAULT_BULK_SYNC_INTERVAL = timedelta(hours=24)


def determine_sync_status(synchronized: int, failed: int, pending: int) -> SyncStatus:
    """Dağıtıcının raporladığı sayılardan genel durumu çıkarır."""
    if pending > 0:
        return SyncStatus.PROCESSING
    if failed == 0:
        return SyncStatus.COMPLETED
    if synchronized > 0:
        return SyncStatus.PARTIAL
    return SyncStatus.FAILED


def next_sync_window(priority: SyncPriority, now: Optional[datetime] = None) -> datetime:
    return (now or utc_now()) + priority.sync_interval


def next_bulk_sync_window(operation: str, now: Optional[datetime] = None) -> datetime:
    interval = BULK_SYNC_INTERVALS.get(str(operation).upper(), DEFAULT_BULK_SYNC_INTERVAL)
    return (now or utc_now()) + interval


def _lookup_inventory(
    lookup: Optional[InventoryLookup], product_id: str, warehouse_id: str
) -> Optional[InventoryItem]:
    if lookup is None:
        return None
    try:
        return lookup(product_id, warehouse_id)
    except Exception as e:
        # Stok bilgisi olmadan da öncelik hesaplanabilir
        logger.warning("Stok sorgulama hatası (%s/%s): %s", warehouse_id, product_id, e)
        return None


def prioritize_records(
    records: Iterable[ProductSyncRecord],
    warehouse_id: str,
    inventory_lookup: Optional[InventoryLookup] = None,
    now: Optional[datetime] = None,
) -> list[ProductSyncRecord]:
    """Her kaydın önceliğini hesaplayıp metadata kopyasına yazar (orijinal kayıt değişmez)."""
    region = get_warehouse_region(warehouse_id)
    scored = []
    for record in records:
        inventory = _lookup_inventory(inventory_lookup, record.product_id, warehouse_id)
        priority = calculate_sync_priority(record, region, inventory, now)
        metadata = dict(record.metadata or {})
        metadata["priority"] = priority.value
        scored.append(replace(record, metadata=metadata))
    return scored


def prepare_warehouse_sync(
    records: Iterable[RecordInput],
    warehouse_id: str,
    config: SyncConfiguration,
    inventory_lookup: Optional[InventoryLookup] = None,
    target_warehouses: Optional[Iterable[str]] = None,
    now: Optional[datetime] = None,
) -> SyncPlan:
    """Bir deponun gelen değişiklikleri için tam senkronizasyon planı üretir."""
    now = now or utc_now()
    sync_id = str(uuid.uuid4())
    region = get_warehouse_region(warehouse_id)

    validation = validate_sync_records(records, now=now)
    scored = prioritize_records(validation.valid_records, warehouse_id, inventory_lookup, now)
    batches = plan_batches(scored, config)

    cross_warehouse = []
    if config.enable_cross_warehouse_sync and batches:
        targets = (
            list(target_warehouses)
            if target_warehouses is not None
            else [wh for wh in WAREHOUSE_IDS if wh != warehouse_id]
        )
        cross_warehouse = schedule_cross_warehouse_sync(warehouse_id, targets, now)

    top_priority = SyncPriority.LOW
    for batch in batches:
        top_priority = escalate(top_priority, batch.priority)

    plan = SyncPlan(
        sync_id=sync_id,
        warehouse_id=warehouse_id,
        region=region,
        validation=validation,
        batches=batches,
        cross_warehouse=cross_warehouse,
        next_sync_window=next_sync_window(top_priority, now),
        created_at=now,
    )

    logger.info(
        "Senkronizasyon planı hazır: sync_id=%s, depo=%s, geçerli=%d, geçersiz=%d, batch=%d, hedef=%d",
        sync_id, warehouse_id, validation.summary.valid, validation.summary.invalid,
        len(batches), len(cross_warehouse),
    )
    return plan
