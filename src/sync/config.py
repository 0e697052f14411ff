"""SyncConfiguration yükleyici.

Öncelik sırası: varsayılanlar < YAML dosyası < SYNC_* ortam değişkenleri <
açık override'lar. Geçersiz değerler servis açılışında tek seferde
ConfigurationError ile reddedilir; motor fonksiyonları konfigürasyonu
tekrar doğrulamaz.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml

from src.models.sync import ConflictStrategy, SyncConfiguration, SyncPriority

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "SYNC_CONFIG_PATH"

# camelCase anahtar -> alan adı
_ALIASES = {
    "autoResolveConflicts": "auto_resolve_conflicts",
    "maxRetryAttempts": "max_retry_attempts",
    "timeoutMs": "timeout_ms",
    "batchSize": "batch_size",
    "conflictResolution": "conflict_resolution",
    "enableCrossWarehouseSync": "enable_cross_warehouse_sync",
    "syncInterval": "sync_interval_ms",
    "sync_interval": "sync_interval_ms",
    "priorityOverrides": "priority_overrides",
    "maxConcurrentSync": "max_concurrent_sync",
}

# alan -> (alt sınır, üst sınır)
_INT_RANGES = {
    "max_retry_attempts": (1, 10),
    "timeout_ms": (1_000, 300_000),
    "batch_size": (1, 100),
    "sync_interval_ms": (60_000, None),
    "max_concurrent_sync": (1, None),
}

_BOOL_FIELDS = ("auto_resolve_conflicts", "enable_cross_warehouse_sync")

_ENV_FIELDS = {
    "SYNC_AUTO_RESOLVE_CONFLICTS": "auto_resolve_conflicts",
    "SYNC_MAX_RETRY_ATTEMPTS": "max_retry_attempts",
    "SYNC_TIMEOUT_MS": "timeout_ms",
    "SYNC_BATCH_SIZE": "batch_size",
    "SYNC_CONFLICT_RESOLUTION": "conflict_resolution",
    "SYNC_ENABLE_CROSS_WAREHOUSE": "enable_cross_warehouse_sync",
    "SYNC_INTERVAL_MS": "sync_interval_ms",
    "SYNC_MAX_CONCURRENT": "max_concurrent_sync",
}


class ConfigurationError(ValueError):
    """Konfigürasyon doğrulama hatası. Tüm sorunları birlikte taşır."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("Geçersiz senkronizasyon konfigürasyonu: " + "; ".join(errors))


def _normalize_keys(data: Mapping[str, Any]) -> dict:
    return {_ALIASES.get(key, key): value for key, value in data.items()}


def read_config_file(path: Union[str, Path]) -> dict:
    """YAML dosyasını okur. Dosya üst seviyede `sync:` anahtarı taşıyabilir."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, Mapping):
        raise ConfigurationError([f"{path}: üst seviye bir mapping olmalı"])
    if isinstance(data.get("sync"), Mapping):
        data = data["sync"]
    return _normalize_keys(data)


def read_environment(environ: Optional[Mapping[str, str]] = None) -> dict:
    environ = os.environ if environ is None else environ
    return {field: environ[name] for name, field in _ENV_FIELDS.items() if name in environ}


def _to_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off"):
            return False
    return None


def _to_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def build_configuration(values: Mapping[str, Any]) -> SyncConfiguration:
    """Ham değerleri doğrular ve SyncConfiguration üretir."""
    values = _normalize_keys(values)
    errors: list[str] = []
    fields: dict[str, Any] = {}

    unknown = sorted(set(values) - set(SyncConfiguration.__dataclass_fields__))
    if unknown:
        logger.warning("Bilinmeyen konfigürasyon anahtarları yok sayıldı: %s", ", ".join(unknown))

    for name in _BOOL_FIELDS:
        if name in values:
            parsed = _to_bool(values[name])
            if parsed is None:
                errors.append(f"{name}: boolean olmalı, gelen {values[name]!r}")
            else:
                fields[name] = parsed

    for name, (low, high) in _INT_RANGES.items():
        if name not in values:
            continue
        parsed = _to_int(values[name])
        if parsed is None:
            errors.append(f"{name}: tam sayı olmalı, gelen {values[name]!r}")
        elif parsed < low or (high is not None and parsed > high):
            bound = f"{low}-{high}" if high is not None else f">= {low}"
            errors.append(f"{name}: {bound} aralığında olmalı, gelen {parsed}")
        else:
            fields[name] = parsed

    if "conflict_resolution" in values:
        raw = values["conflict_resolution"]
        try:
            fields["conflict_resolution"] = ConflictStrategy(str(raw).strip().upper())
        except ValueError:
            options = ", ".join(s.value for s in ConflictStrategy)
            errors.append(f"conflict_resolution: {options} değerlerinden biri olmalı, gelen {raw!r}")

    overrides = values.get("priority_overrides")
    if overrides is not None:
        if not isinstance(overrides, Mapping):
            errors.append("priority_overrides: ürün -> öncelik mapping'i olmalı")
        else:
            parsed_overrides = {}
            for product_id, raw in overrides.items():
                priority = SyncPriority.parse(raw)
                if priority is None:
                    errors.append(f"priority_overrides.{product_id}: geçersiz öncelik {raw!r}")
                else:
                    parsed_overrides[str(product_id)] = priority
            fields["priority_overrides"] = parsed_overrides

    if errors:
        raise ConfigurationError(errors)
    return SyncConfiguration(**fields)


def load_sync_configuration(
    path: Union[str, Path, None] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> SyncConfiguration:
    """Servis açılışında konfigürasyonu yükler ve doğrular."""
    environ = os.environ if environ is None else environ
    values: dict[str, Any] = {}

    path = path or environ.get(CONFIG_PATH_ENV)
    if path:
        values.update(read_config_file(path))
        logger.info("Senkronizasyon konfigürasyonu okundu: %s", path)

    values.update(read_environment(environ))
    if overrides:
        values.update(_normalize_keys(overrides))

    config = build_configuration(values)
    logger.info(
        "Konfigürasyon hazır: batch_size=%d, strateji=%s, depolar_arası=%s",
        config.batch_size, config.conflict_resolution.value, config.enable_cross_warehouse_sync,
    )
    return config
