"""Simülasyon verisi üretim modülü.

4 depo (US, Japonya, AB, Avustralya), FlexVolt ve genel ürünler için
senkronizasyon kayıtları, stok durumu satırları ve çalıştırma geçmişi üretir.

Problemli senaryolar:
- Stok tükenmesi (OUT_OF_STOCK) ve düşük stok
- Hatalı FlexVolt kapasitesi ve fiyat uyumsuzluğu
- Negatif miktar, geçersiz ürün ID'si
- Son kullanma tarihi geçmiş/yaklaşan ürünler
- Acil (rush) ve karmaşık siparişler
"""
import random
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from src.models.sync import InventoryStatus, Region
from src.sync.regions import WAREHOUSE_IDS
from src.sync.validator import FLEXVOLT_PRICES, FLEXVOLT_PRODUCT_TYPE

# --- SABİTLER ---

PRODUCT_TYPES = ["POWER_TOOL", "ACCESSORY", "CHARGER", FLEXVOLT_PRODUCT_TYPE]
LOCATION_PREFIX = {
    Region.US: "US",
    Region.JAPAN: "JP",
    Region.EU: "EU",
    Region.AUSTRALIA: "AU",
}


def _product_ids(count: int, rng: random.Random) -> List[str]:
    return [str(uuid.UUID(int=rng.getrandbits(128), version=4)) for _ in range(count)]


def generate_sync_records(
    count: int = 40,
    seed: int = 42,
    now: Optional[datetime] = None,
    include_problems: bool = True,
) -> List[Dict]:
    """Ham (payload formatında, camelCase) senkronizasyon kayıtları üretir."""
    rng = random.Random(seed)
    now = now or datetime.now(timezone.utc)
    records = []

    for product_id in _product_ids(count, rng):
        region = rng.choice(list(Region))
        product_type = rng.choice(PRODUCT_TYPES)
        metadata = {
            "productType": product_type,
            "region": region.value,
            "isRushOrder": rng.random() < 0.05,
            "isComplex": rng.random() < 0.15,
        }
        record = {
            "productId": product_id,
            "quantity": rng.choice([rng.randint(0, 200), rng.randint(500, 3000)]),
            "location": f"{LOCATION_PREFIX[region]}-{rng.randint(1, 40):02d}-{rng.choice('ABC')}{rng.randint(1, 9)}",
            "metadata": metadata,
        }
        if product_type == FLEXVOLT_PRODUCT_TYPE:
            capacity = rng.choice(list(FLEXVOLT_PRICES))
            metadata["capacity"] = capacity
            record["cost"] = FLEXVOLT_PRICES[capacity]
        else:
            record["cost"] = round(rng.uniform(9.99, 499.0), 2)
        if rng.random() < 0.1:
            record["expiryDate"] = (now + timedelta(days=rng.randint(5, 400))).isoformat()
        records.append(record)

    if include_problems:
        records.extend(_problem_records(rng, now))
    return records


def _problem_records(rng: random.Random, now: datetime) -> List[Dict]:
    pid = lambda: str(uuid.UUID(int=rng.getrandbits(128), version=4))  # noqa: E731
    return [
        # Negatif miktar
        {"productId": pid(), "quantity": -3},
        # Geçersiz ID
        {"productId": "not-a-uuid", "quantity": 10},
        # Hatalı kapasite
        {"productId": pid(), "quantity": 5,
         "metadata": {"productType": FLEXVOLT_PRODUCT_TYPE, "capacity": "12Ah"}},
        # Fiyat uyumsuzluğu (uyarı)
        {"productId": pid(), "quantity": 12, "cost": 200,
         "metadata": {"productType": FLEXVOLT_PRODUCT_TYPE, "capacity": "6Ah"}},
        # Son kullanma geçmiş
        {"productId": pid(), "quantity": 7, "expiryDate": (now - timedelta(days=2)).isoformat()},
        # Çok büyük miktar ve bozuk lokasyon (uyarı)
        {"productId": pid(), "quantity": 15000, "location": "warehouse-7"},
    ]


def generate_inventory_rows(seed: int = 42, count: int = 40) -> List[Dict]:
    """SyncInventory tablosu için stok durumu satırları."""
    rng = random.Random(seed)
    now = datetime.now(timezone.utc)
    statuses = [InventoryStatus.IN_STOCK] * 6 + [InventoryStatus.LOW_STOCK] * 3 + [InventoryStatus.OUT_OF_STOCK]
    rows = []
    for product_id in _product_ids(count, rng):
        for warehouse_id in WAREHOUSE_IDS:
            status = rng.choice(statuses)
            rows.append({
                "warehouse_id": warehouse_id,
                "product_id": product_id,
                "status": status.value,
                "quantity": 0 if status is InventoryStatus.OUT_OF_STOCK else rng.randint(1, 500),
                "last_updated": (now - timedelta(minutes=rng.randint(0, 7 * 24 * 60))).isoformat(),
                "metadata": {"priority": rng.choice(["LOW", "MEDIUM", "HIGH"])},
            })
    return rows


def generate_history_rows(seed: int = 42, days: int = 7, runs_per_day: int = 12) -> List[Dict]:
    """SyncHistory tablosu için çalıştırma geçmişi (yaklaşık %93 başarı)."""
    rng = random.Random(seed)
    start = datetime.now(timezone.utc) - timedelta(days=days)
    rows = []
    for warehouse_id in WAREHOUSE_IDS:
        for i in range(days * runs_per_day):
            started_at = start + timedelta(hours=i * 24 / runs_per_day, minutes=rng.randint(0, 59))
            completed = rng.random() < 0.93
            synced = rng.randint(5, 100)
            rows.append({
                "warehouse_id": warehouse_id,
                "started_at": started_at.isoformat(),
                "status": "COMPLETED" if completed else rng.choice(["FAILED", "PARTIAL"]),
                "duration_ms": float(rng.randint(800, 45_000)),
                "synced_products": synced if completed else synced // 2,
                "failed_products": 0 if completed else rng.randint(1, 20),
            })
    return rows
