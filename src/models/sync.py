"""Envanter senkronizasyonu veri modelleri."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Mapping, Optional, Union


class SyncPriority(str, Enum):
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def weight(self) -> int:
        return PRIORITY_WEIGHTS[self]

    @property
    def timeout_ms(self) -> int:
        return PRIORITY_TIMEOUTS_MS[self]

    @property
    def sync_interval(self) -> timedelta:
        return PRIORITY_SYNC_INTERVALS[self]

    @classmethod
    def parse(cls, value: Any, default: Optional["SyncPriority"] = None) -> Optional["SyncPriority"]:
        """Serbest metin/enum değerini önceliğe çevirir, bilinmeyen değerde default döner."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                return default
        return default


# Ağırlıklar karşılaştırma içindir, gösterim değeri değildir
PRIORITY_WEIGHTS: Mapping[SyncPriority, int] = {
    SyncPriority.CRITICAL: 100,
    SyncPriority.HIGH: 75,
    SyncPriority.MEDIUM: 50,
    SyncPriority.LOW: 25,
}

PRIORITY_TIMEOUTS_MS: Mapping[SyncPriority, int] = {
    SyncPriority.CRITICAL: 5_000,
    SyncPriority.HIGH: 15_000,
    SyncPriority.MEDIUM: 30_000,
    SyncPriority.LOW: 60_000,
}

PRIORITY_SYNC_INTERVALS: Mapping[SyncPriority, timedelta] = {
    SyncPriority.CRITICAL: timedelta(minutes=5),
    SyncPriority.HIGH: timedelta(minutes=15),
    SyncPriority.MEDIUM: timedelta(hours=1),
    SyncPriority.LOW: timedelta(hours=4),
}


class InventoryStatus(str, Enum):
    IN_STOCK = "IN_STOCK"
    LOW_STOCK = "LOW_STOCK"
    OUT_OF_STOCK = "OUT_OF_STOCK"


class ConflictStrategy(str, Enum):
    LAST_WRITE_WINS = "LAST_WRITE_WINS"
    MANUAL = "MANUAL"
    PRIORITY_BASED = "PRIORITY_BASED"


class Region(str, Enum):
    US = "US"
    JAPAN = "Japan"
    EU = "EU"
    AUSTRALIA = "Australia"


class SyncWindow(str, Enum):
    # IMMEDIATE hiçbir hesaplamada üretilmez, sadece isim olarak mevcut
    IMMEDIATE = "IMMEDIATE"
    BUSINESS_HOURS = "BUSINESS_HOURS"
    OFF_HOURS = "OFF_HOURS"


class SyncStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    PARTIAL = "PARTIAL"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


class AlertSeverity(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


class TrendDirection(str, Enum):
    INCREASING = "INCREASING"
    DECREASING = "DECREASING"
    IMPROVING = "IMPROVING"
    DEGRADING = "DEGRADING"
    STABLE = "STABLE"


@dataclass(frozen=True)
class WorkingHours:
    start: int
    end: int


@dataclass(frozen=True)
class WarehouseRegion:
    region: Region
    timezone: str
    currency: str
    working_hours: WorkingHours


# camelCase payload anahtarı -> alan adı
_RECORD_KEYS = {
    "productId": "product_id",
    "batchNumber": "batch_number",
    "expiryDate": "expiry_date",
}


@dataclass(frozen=True)
class ProductSyncRecord:
    product_id: Any
    quantity: Any
    location: Optional[str] = None
    batch_number: Optional[str] = None
    expiry_date: Optional[str] = None
    cost: Optional[float] = None
    metadata: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProductSyncRecord":
        """Ham payload'dan kayıt oluşturur. Doğrulama yapmaz, validator'ın işi."""
        values = {}
        for key, value in data.items():
            name = _RECORD_KEYS.get(key, key)
            if name in cls.__dataclass_fields__:
                values[name] = value
        values.setdefault("product_id", None)
        values.setdefault("quantity", None)
        if values.get("metadata") is None:
            values["metadata"] = {}
        return cls(**values)

    def meta(self, key: str, default: Any = None) -> Any:
        if isinstance(self.metadata, Mapping):
            return self.metadata.get(key, default)
        return default


@dataclass(frozen=True)
class InventoryItem:
    product_id: str
    warehouse_id: str
    status: InventoryStatus
    last_updated: datetime
    quantity: int = 0
    metadata: dict = field(default_factory=dict)


@dataclass(frozen=True)
class SyncConfiguration:
    auto_resolve_conflicts: bool = True
    max_retry_attempts: int = 3
    timeout_ms: int = 30_000
    batch_size: int = 10
    conflict_resolution: ConflictStrategy = ConflictStrategy.LAST_WRITE_WINS
    enable_cross_warehouse_sync: bool = True
    sync_interval_ms: int = 300_000
    priority_overrides: Mapping[str, SyncPriority] = field(default_factory=dict)
    max_concurrent_sync: int = 4


@dataclass
class InvalidRecord:
    record: Any
    errors: list[str] = field(default_factory=list)


@dataclass
class ValidationSummary:
    total: int
    valid: int
    invalid: int
    warning_count: int


@dataclass
class SyncValidationResult:
    valid_records: list[ProductSyncRecord]
    invalid_records: list[InvalidRecord]
    warnings: list[str]
    summary: ValidationSummary

    @property
    def is_valid(self) -> bool:
        return not self.invalid_records


@dataclass(frozen=True)
class SyncBatch:
    batch_id: str
    products: tuple[ProductSyncRecord, ...]
    priority: SyncPriority
    estimated_duration_ms: int
    region: Optional[str] = None

    def __len__(self) -> int:
        return len(self.products)


@dataclass(frozen=True)
class ConflictResolutionResult:
    resolved: InventoryItem
    strategy: ConflictStrategy
    reason: str
    requires_manual_review: bool


@dataclass(frozen=True)
class ScheduleEntry:
    warehouse_id: str
    region: Region
    priority_score: float
    sync_window: SyncWindow
    estimated_delay_ms: int


@dataclass
class SyncRun:
    status: Union[SyncStatus, str]
    duration_ms: float = 0.0
    synced_products: int = 0
    failed_products: int = 0
    started_at: Optional[datetime] = None
    warehouse_id: Optional[str] = None

    @property
    def status_value(self) -> str:
        """Enum veya serbest metin durumu düz metne çevirir."""
        if isinstance(self.status, SyncStatus):
            return self.status.value
        return str(self.status)


@dataclass
class PerformanceMetrics:
    success_rate: float
    average_sync_time_ms: float
    throughput: float


@dataclass
class SyncTrends:
    sync_frequency: TrendDirection
    error_rate: TrendDirection
    peak_hours: list[int]


@dataclass
class SyncAlert:
    severity: AlertSeverity
    message: str


@dataclass
class SyncInsights:
    performance: PerformanceMetrics
    trends: SyncTrends
    recommendations: list[str]
    alerts: list[SyncAlert]


@dataclass
class SyncMetrics:
    total_syncs: int
    average_duration_ms: float
    total_products_synced: int
    total_products_failed: int
    success_rate: float
    period: timedelta


@dataclass
class SyncPlan:
    sync_id: str
    warehouse_id: str
    region: Region
    validation: SyncValidationResult
    batches: list[SyncBatch]
    cross_warehouse: list[ScheduleEntry]
    next_sync_window: datetime
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def product_count(self) -> int:
        return sum(len(b) for b in self.batches)
