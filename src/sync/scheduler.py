"""Depolar arası senkronizasyon sırası.

Kaynak deponun değişikliklerinin hangi hedef depoya önce gönderileceğini
belirler. Çıktı bir öneridir; dağıtıcı uyumlu batch'leri yine paralel
çalıştırabilir.

Skor = 50 (taban)
     + 30 (aynı bölge)
     + 20 (hedef çalışma saatinde)
     + 10 × bölgesel talep faktörü
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from src.models.sync import ScheduleEntry, SyncWindow
from src.sync.regions import (
    estimate_sync_delay_ms,
    get_warehouse_region,
    is_within_business_hours,
    regional_demand_factor,
    utc_now,
)

logger = logging.getLogger(__name__)

BASE_SCORE = 50.0
SAME_REGION_BONUS = 30.0
BUSINESS_HOURS_BONUS = 20.0
DEMAND_WEIGHT = 10.0


def score_target(source_warehouse: str, target_warehouse: str, now: datetime) -> ScheduleEntry:
    source_region = get_warehouse_region(source_warehouse)
    region = get_warehouse_region(target_warehouse)
    business_hours = is_within_business_hours(region, now)

    score = BASE_SCORE
    if region is source_region:
        score += SAME_REGION_BONUS
    if business_hours:
        score += BUSINESS_HOURS_BONUS
    score += DEMAND_WEIGHT * regional_demand_factor(region, now)

    return ScheduleEntry(
        warehouse_id=target_warehouse,
        region=region,
        priority_score=round(score, 4),
        sync_window=SyncWindow.BUSINESS_HOURS if business_hours else SyncWindow.OFF_HOURS,
        estimated_delay_ms=estimate_sync_delay_ms(source_region, region, now),
    )


def schedule_cross_warehouse_sync(
    source_warehouse: str,
    target_warehouses: Iterable[str],
    now: Optional[datetime] = None,
) -> list[ScheduleEntry]:
    """Hedef depoları öncelik skoruna göre (yüksekten düşüğe) sıralar."""
    now = now or utc_now()
    entries = [score_target(source_warehouse, target, now) for target in target_warehouses]
    entries.sort(key=lambda e: e.priority_score, reverse=True)
    logger.debug(
        "Depolar arası sıra (%s): %s",
        source_warehouse, [(e.warehouse_id, e.priority_score) for e in entries],
    )
    return entries
