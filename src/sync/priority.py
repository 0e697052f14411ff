"""Ürün ve bağlam bazında senkronizasyon önceliği hesaplama."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Union

from src.models.sync import InventoryItem, InventoryStatus, ProductSyncRecord, Region, SyncPriority
from src.sync.regions import is_within_business_hours, parse_region
from src.sync.validator import FLEXVOLT_PRODUCT_TYPE

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = SyncPriority.MEDIUM
LARGE_ORDER_QUANTITY = 1000
HIGH_VALUE_CAPACITY = "15Ah"


def escalate(current: SyncPriority, target: SyncPriority) -> SyncPriority:
    """Önceliği yükseltir, asla düşürmez. Eşit ağırlıkta mevcut değer korunur."""
    return target if target.weight > current.weight else current


def calculate_sync_priority(
    record: ProductSyncRecord,
    region_code: Union[str, Region, None],
    current_inventory: Optional[InventoryItem] = None,
    now: Optional[datetime] = None,
) -> SyncPriority:
    """Kayıt, hedef bölge ve mevcut stok durumuna göre önceliği belirler.

    Sıra önemlidir: her adım sadece yükseltir. Stok tükenmişse doğrudan
    CRITICAL olur; acil sipariş (isRushOrder) her durumda son sözü söyler.
    """
    priority = DEFAULT_PRIORITY
    status = current_inventory.status if current_inventory is not None else None

    if status == InventoryStatus.OUT_OF_STOCK:
        priority = SyncPriority.CRITICAL
    else:
        if status == InventoryStatus.LOW_STOCK:
            priority = escalate(priority, SyncPriority.HIGH)

        # Yüksek değerli endüstriyel bataryalar
        if (
            record.meta("productType") == FLEXVOLT_PRODUCT_TYPE
            and record.meta("capacity") == HIGH_VALUE_CAPACITY
        ):
            priority = escalate(priority, SyncPriority.HIGH)

        region = parse_region(region_code)
        if region is not None and is_within_business_hours(region, now):
            priority = escalate(priority, SyncPriority.HIGH)

        if isinstance(record.quantity, int) and record.quantity > LARGE_ORDER_QUANTITY:
            priority = escalate(priority, SyncPriority.HIGH)

    if record.meta("isRushOrder") is True:
        priority = SyncPriority.CRITICAL

    return priority
