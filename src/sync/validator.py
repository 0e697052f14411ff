"""Senkronizasyon kaydı validasyonu.

Şema kontrolleri (UUID, miktar, maliyet, tarih) ve iş kuralları (FlexVolt
kapasite/fiyat, son kullanma, büyük miktar, lokasyon formatı). Hatalar
kaydı reddeder, uyarılar sadece bilgi amaçlıdır. Hiçbir durumda exception
fırlatmaz; tüm sonuçlar SyncValidationResult içinde döner.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Mapping, Optional, Union

from src.models.sync import (
    InvalidRecord,
    ProductSyncRecord,
    SyncValidationResult,
    ValidationSummary,
)

logger = logging.getLogger(__name__)

FLEXVOLT_PRODUCT_TYPE = "FLEXVOLT_BATTERY"
FLEXVOLT_PRICES: Mapping[str, float] = {"6Ah": 149, "9Ah": 239, "15Ah": 359}
FLEXVOLT_CAPACITIES = frozenset(FLEXVOLT_PRICES)

EXPIRY_WARNING_WINDOW = timedelta(days=30)
LARGE_QUANTITY_THRESHOLD = 10_000
LOCATION_PATTERN = re.compile(r"^[A-Z]{2}-\d{2}-[A-Z0-9]{1,3}$")
UUID_PATTERN = re.compile(r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}")

RecordInput = Union[ProductSyncRecord, Mapping[str, Any]]


def parse_timestamp(value: Any) -> Optional[datetime]:
    """ISO-8601 zaman damgasını ayrıştırır, geçersizse None döner."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _is_uuid(value: Any) -> bool:
    # Sadece tireli 8-4-4-4-12 biçimi
    return isinstance(value, str) and UUID_PATTERN.fullmatch(value) is not None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def check_schema(record: ProductSyncRecord) -> list[str]:
    """Alan bazında şema hatalarını toplar (ilk hatada durmaz)."""
    errors = []

    if not _is_uuid(record.product_id):
        errors.append(f"productId: Invalid product ID: {record.product_id!r}")

    if not isinstance(record.quantity, int) or isinstance(record.quantity, bool):
        errors.append(f"quantity: Quantity must be an integer, got {record.quantity!r}")
    elif record.quantity < 0:
        errors.append(f"quantity: Quantity cannot be negative ({record.quantity})")

    if record.cost is not None:
        if not _is_number(record.cost):
            errors.append(f"cost: Cost must be a number, got {record.cost!r}")
        elif record.cost <= 0:
            errors.append(f"cost: Cost must be positive ({record.cost})")

    if record.expiry_date is not None and parse_timestamp(record.expiry_date) is None:
        errors.append(f"expiryDate: Invalid ISO timestamp: {record.expiry_date!r}")

    if record.location is not None and not isinstance(record.location, str):
        errors.append("location: Location must be a string")

    if not isinstance(record.metadata, Mapping):
        errors.append("metadata: Metadata must be a mapping")

    return errors


def check_business_rules(record: ProductSyncRecord, now: datetime) -> tuple[list[str], list[str]]:
    """Şemadan geçmiş kayıt için iş kurallarını uygular. (errors, warnings) döner."""
    errors: list[str] = []
    warnings: list[str] = []

    # FlexVolt kapasite ve fiyat tutarlılığı
    if record.meta("productType") == FLEXVOLT_PRODUCT_TYPE:
        capacity = record.meta("capacity")
        if capacity and (not isinstance(capacity, str) or capacity not in FLEXVOLT_CAPACITIES):
            errors.append(
                f"Invalid FlexVolt battery capacity {capacity!r}. Must be 6Ah, 9Ah, or 15Ah"
            )
        elif capacity and record.cost is not None and record.cost != FLEXVOLT_PRICES[capacity]:
            warnings.append(
                f"Price mismatch for {capacity} battery. "
                f"Expected: ${FLEXVOLT_PRICES[capacity]}, got: ${record.cost}"
            )

    if record.expiry_date is not None:
        expiry = parse_timestamp(record.expiry_date)
        if expiry <= now:
            errors.append("Product expiry date cannot be in the past")
        elif expiry - now < EXPIRY_WARNING_WINDOW:
            warnings.append(f"Product {record.product_id} expires within 30 days")

    if record.quantity > LARGE_QUANTITY_THRESHOLD:
        warnings.append(
            f"Large quantity detected for {record.product_id} ({record.quantity}). "
            "Consider splitting into multiple batches."
        )

    if record.location and not LOCATION_PATTERN.match(record.location):
        warnings.append(
            f"Location {record.location!r} should use the format XX-##-XXX (e.g., US-01-A1B)"
        )

    return errors, warnings


def _coerce(raw: Any) -> Optional[ProductSyncRecord]:
    if isinstance(raw, ProductSyncRecord):
        return raw
    if isinstance(raw, Mapping):
        return ProductSyncRecord.from_dict(raw)
    return None


def validate_sync_records(
    records: Iterable[RecordInput], now: Optional[datetime] = None
) -> SyncValidationResult:
    """Kayıtları geçerli/geçersiz olarak ayırır, uyarıları toplar."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    valid: list[ProductSyncRecord] = []
    invalid: list[InvalidRecord] = []
    warnings: list[str] = []
    total = 0

    for raw in records:
        total += 1
        record = _coerce(raw)
        if record is None:
            invalid.append(InvalidRecord(record=raw, errors=["Record must be a mapping or ProductSyncRecord"]))
            continue

        errors = check_schema(record)
        if errors:
            invalid.append(InvalidRecord(record=record, errors=errors))
            continue

        errors, record_warnings = check_business_rules(record, now)
        if errors:
            invalid.append(InvalidRecord(record=record, errors=errors))
            continue

        valid.append(record)
        warnings.extend(record_warnings)

    summary = ValidationSummary(
        total=total,
        valid=len(valid),
        invalid=len(invalid),
        warning_count=len(warnings),
    )
    logger.debug(
        "Validasyon tamamlandı: toplam=%d, geçerli=%d, geçersiz=%d, uyarı=%d",
        summary.total, summary.valid, summary.invalid, summary.warning_count,
    )
    return SyncValidationResult(
        valid_records=valid,
        invalid_records=invalid,
        warnings=warnings,
        summary=summary,
    )
