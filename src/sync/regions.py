"""Depo bölgeleri, çalışma saatleri, bölgesel talep ve gecikme tabloları."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Mapping, Optional, Union
from zoneinfo import ZoneInfo

from src.models.sync import Region, WarehouseRegion, WorkingHours

logger = logging.getLogger(__name__)

WAREHOUSE_REGIONS: Mapping[Region, WarehouseRegion] = MappingProxyType({
    Region.US: WarehouseRegion(Region.US, "America/Los_Angeles", "USD", WorkingHours(6, 18)),
    Region.JAPAN: WarehouseRegion(Region.JAPAN, "Asia/Tokyo", "JPY", WorkingHours(9, 18)),
    Region.EU: WarehouseRegion(Region.EU, "Europe/Berlin", "EUR", WorkingHours(8, 17)),
    Region.AUSTRALIA: WarehouseRegion(Region.AUSTRALIA, "Australia/Sydney", "AUD", WorkingHours(8, 17)),
})

WAREHOUSE_IDS: Mapping[str, Region] = MappingProxyType({
    "us-warehouse": Region.US,
    "japan-warehouse": Region.JAPAN,
    "eu-warehouse": Region.EU,
    "australia-warehouse": Region.AUSTRALIA,
})

DEFAULT_REGION = Region.US

BASE_DEMAND: Mapping[Region, float] = MappingProxyType({
    Region.US: 0.8,
    Region.JAPAN: 0.6,
    Region.EU: 0.7,
    Region.AUSTRALIA: 0.5,
})

PEAK_SEASON_MULTIPLIER = 1.2
OFF_SEASON_MULTIPLIER = 0.8

# Yarım küreye göre inşaat sezonu (0 tabanlı ay: 0=Ocak)
NORTHERN_SEASON_MONTHS = frozenset(range(3, 10))
SOUTHERN_SEASON_MONTHS = frozenset({9, 10, 11, 0, 1, 2})

# Bölgeler arası ağ gecikmesi (ms), simetrik
BASE_LATENCY_MS: Mapping[frozenset, int] = MappingProxyType({
    frozenset({Region.US, Region.JAPAN}): 150,
    frozenset({Region.US, Region.EU}): 100,
    frozenset({Region.US, Region.AUSTRALIA}): 200,
    frozenset({Region.JAPAN, Region.EU}): 250,
    frozenset({Region.JAPAN, Region.AUSTRALIA}): 100,
    frozenset({Region.EU, Region.AUSTRALIA}): 300,
})
DEFAULT_LATENCY_MS = 100
PROCESSING_OVERHEAD_MS = 50
OFF_HOURS_DELAY_MULTIPLIER = 1.5


def parse_region(code: Union[str, Region, None]) -> Optional[Region]:
    """Bölge kodunu enum'a çevirir ("japan", "JAPAN", "Japan" hepsi geçerli)."""
    if isinstance(code, Region):
        return code
    if not isinstance(code, str):
        return None
    wanted = code.strip().lower()
    for region in Region:
        if region.value.lower() == wanted or region.name.lower() == wanted:
            return region
    return None


def get_warehouse_region(warehouse_id: str) -> Region:
    """Depo ID'sinden bölgeyi bulur. Bilinmeyen depolar US'e düşer."""
    region = WAREHOUSE_IDS.get(warehouse_id)
    if region is None:
        logger.debug("Bilinmeyen depo %s, varsayılan bölge %s kullanılıyor", warehouse_id, DEFAULT_REGION.value)
        return DEFAULT_REGION
    return region


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _aware(moment: datetime) -> datetime:
    # Saat dilimi olmayan zamanlar UTC kabul edilir
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def is_within_business_hours(region: Region, moment: Optional[datetime] = None) -> bool:
    """Verilen an bölgenin kendi saat diliminde çalışma saatleri içinde mi?"""
    descriptor = WAREHOUSE_REGIONS[region]
    local = _aware(moment or utc_now()).astimezone(ZoneInfo(descriptor.timezone))
    hours = descriptor.working_hours
    return hours.start <= local.hour < hours.end


def seasonal_multiplier(region: Region, moment: datetime) -> float:
    # Sezon ayı her zaman UTC takvimine göre
    month = _aware(moment).astimezone(timezone.utc).month - 1
    if region in (Region.US, Region.EU):
        return PEAK_SEASON_MULTIPLIER if month in NORTHERN_SEASON_MONTHS else OFF_SEASON_MULTIPLIER
    if region is Region.AUSTRALIA:
        return PEAK_SEASON_MULTIPLIER if month in SOUTHERN_SEASON_MONTHS else OFF_SEASON_MULTIPLIER
    # Japonya yıl boyu sabit
    return 1.0


def regional_demand_factor(region: Region, moment: Optional[datetime] = None) -> float:
    """Bölgesel taban talep × mevsimsel çarpan."""
    moment = _aware(moment or utc_now())
    return BASE_DEMAND[region] * seasonal_multiplier(region, moment)


def base_latency_ms(source: Region, target: Region) -> int:
    return BASE_LATENCY_MS.get(frozenset({source, target}), DEFAULT_LATENCY_MS)


def estimate_sync_delay_ms(source: Region, target: Region, moment: Optional[datetime] = None) -> int:
    """(taban gecikme + işlem süresi), hedef mesai dışındaysa 1.5 ile çarpılır."""
    delay = base_latency_ms(source, target) + PROCESSING_OVERHEAD_MS
    if not is_within_business_hours(target, moment):
        delay *= OFF_HOURS_DELAY_MULTIPLIER
    return int(round(delay))
