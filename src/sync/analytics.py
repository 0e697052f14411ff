"""Senkronizasyon analitiği - performans, trend, öneri ve uyarılar.

Geçmiş çalıştırma kayıtlarından sağlık sinyalleri üretir. Boş veya bozuk
veri geldiğinde exception fırlatmaz, sıfır/nötr değerler döndürür; böylece
izleme paneli eksik veride çökmez.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Mapping, Optional

from src.models.sync import (
    AlertSeverity,
    PerformanceMetrics,
    SyncAlert,
    SyncInsights,
    SyncMetrics,
    SyncRun,
    SyncStatus,
    SyncTrends,
    TrendDirection,
)
from src.sync.validator import parse_timestamp

logger = logging.getLogger(__name__)

MS_PER_HOUR = 3_600_000

SUCCESS_RATE_CRITICAL = 90.0
SUCCESS_RATE_TARGET = 95.0
SLOW_SYNC_ALERT_MS = 60_000
SLOW_SYNC_RECOMMENDATION_MS = 30_000
MIN_THROUGHPUT_PER_HOUR = 100.0

MIN_RUNS_FOR_TREND = 4
ERROR_RATE_TREND_POINTS = 5.0
FREQUENCY_INCREASE_RATIO = 1.2
FREQUENCY_DECREASE_RATIO = 0.8
PEAK_HOUR_COUNT = 6
DEFAULT_PEAK_HOURS = [9, 10, 11, 14, 15, 16]


def _number(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def coerce_run(entry: Any) -> SyncRun:
    """Dict veya SyncRun girdisini SyncRun'a çevirir; bozuk alanlar sıfırlanır."""
    if isinstance(entry, SyncRun):
        return entry
    if not isinstance(entry, Mapping):
        return SyncRun(status="UNKNOWN")
    status = entry.get("status")
    return SyncRun(
        status=str(status.value if isinstance(status, SyncStatus) else status or "UNKNOWN"),
        duration_ms=_number(entry.get("duration_ms", entry.get("duration"))),
        synced_products=int(_number(entry.get("synced_products", entry.get("syncedProducts")))),
        failed_products=int(_number(entry.get("failed_products", entry.get("failedProducts")))),
        started_at=parse_timestamp(entry.get("started_at", entry.get("startedAt"))),
        warehouse_id=entry.get("warehouse_id", entry.get("warehouseId")),
    )


def _coerce_history(history: Optional[Iterable[Any]]) -> list[SyncRun]:
    try:
        return [coerce_run(entry) for entry in (history or [])]
    except TypeError:
        logger.warning("Senkronizasyon geçmişi okunamadı, boş kabul ediliyor")
        return []


def _is_completed(run: SyncRun) -> bool:
    return run.status_value.upper() == SyncStatus.COMPLETED.value


def _started_at(run: SyncRun) -> Optional[datetime]:
    moment = run.started_at
    if isinstance(moment, datetime) and moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment if isinstance(moment, datetime) else None


# --- Performans ---

def calculate_performance(runs: list[SyncRun]) -> PerformanceMetrics:
    total = len(runs)
    if total == 0:
        return PerformanceMetrics(success_rate=100.0, average_sync_time_ms=0.0, throughput=0.0)

    completed = sum(1 for r in runs if _is_completed(r))
    total_duration = sum(_number(r.duration_ms) for r in runs)
    total_products = sum(_number(r.synced_products) for r in runs)

    return PerformanceMetrics(
        success_rate=completed / total * 100,
        average_sync_time_ms=total_duration / total,
        throughput=total_products / total_duration * MS_PER_HOUR if total_duration > 0 else 0.0,
    )


# --- Trendler ---

def _error_rate(runs: list[SyncRun]) -> float:
    if not runs:
        return 0.0
    return sum(1 for r in runs if not _is_completed(r)) / len(runs) * 100


def _error_rate_trend(ordered: list[SyncRun]) -> TrendDirection:
    half = len(ordered) // 2
    older, recent = ordered[:half], ordered[half:]
    delta = _error_rate(recent) - _error_rate(older)
    if delta < -ERROR_RATE_TREND_POINTS:
        return TrendDirection.IMPROVING
    if delta > ERROR_RATE_TREND_POINTS:
        return TrendDirection.DEGRADING
    return TrendDirection.STABLE


def _frequency_trend(timestamps: list[datetime]) -> TrendDirection:
    if len(timestamps) < MIN_RUNS_FOR_TREND:
        return TrendDirection.STABLE
    first, last = timestamps[0], timestamps[-1]
    if last <= first:
        return TrendDirection.STABLE
    midpoint = first + (last - first) / 2
    older = sum(1 for t in timestamps if t < midpoint)
    recent = len(timestamps) - older
    if older == 0:
        return TrendDirection.INCREASING
    ratio = recent / older
    if ratio > FREQUENCY_INCREASE_RATIO:
        return TrendDirection.INCREASING
    if ratio < FREQUENCY_DECREASE_RATIO:
        return TrendDirection.DECREASING
    return TrendDirection.STABLE


def _peak_hours(timestamps: list[datetime]) -> list[int]:
    if not timestamps:
        return list(DEFAULT_PEAK_HOURS)
    counts = Counter(t.astimezone(timezone.utc).hour for t in timestamps)
    return sorted(hour for hour, _ in counts.most_common(PEAK_HOUR_COUNT))


def analyze_trends(runs: list[SyncRun]) -> SyncTrends:
    """Eski ve yeni yarıyı karşılaştırarak sıklık ve hata oranı trendini çıkarır."""
    timestamps = sorted(t for t in (_started_at(r) for r in runs) if t is not None)
    if len(runs) < MIN_RUNS_FOR_TREND:
        return SyncTrends(
            sync_frequency=TrendDirection.STABLE,
            error_rate=TrendDirection.STABLE,
            peak_hours=_peak_hours(timestamps),
        )

    # Zaman damgası olanlar kronolojik, olmayanlar giriş sırasında sona eklenir
    dated = sorted((r for r in runs if _started_at(r) is not None), key=_started_at)
    undated = [r for r in runs if _started_at(r) is None]
    ordered = dated + undated

    return SyncTrends(
        sync_frequency=_frequency_trend(timestamps),
        error_rate=_error_rate_trend(ordered),
        peak_hours=_peak_hours(timestamps),
    )


# --- Öneriler ve uyarılar ---

def _metric(metrics: Optional[Mapping[str, Any]], *keys: str) -> float:
    if not isinstance(metrics, Mapping):
        return 0.0
    for key in keys:
        if key in metrics:
            return _number(metrics[key])
    return 0.0


def generate_recommendations(
    performance: PerformanceMetrics,
    trends: SyncTrends,
    run_count: int,
    warehouse_metrics: Optional[Mapping[str, Any]] = None,
) -> list[str]:
    recommendations = []

    if performance.success_rate < SUCCESS_RATE_TARGET:
        recommendations.append("Consider investigating and resolving frequent sync failures")

    if trends.error_rate is TrendDirection.DEGRADING:
        recommendations.append("Failure rate is rising; review recent configuration or network changes")

    if performance.average_sync_time_ms > SLOW_SYNC_RECOMMENDATION_MS:
        recommendations.append("Optimize sync batching to improve performance")

    if run_count > 0 and performance.throughput < MIN_THROUGHPUT_PER_HOUR:
        recommendations.append("Increase parallel processing for better throughput")

    backlog = int(_metric(warehouse_metrics, "manual_review_backlog", "manualReviewBacklog"))
    if backlog > 0:
        recommendations.append(f"Review {backlog} conflict(s) awaiting manual resolution")

    active = _metric(warehouse_metrics, "active_syncs", "activeSyncs")
    capacity = _metric(warehouse_metrics, "max_concurrent_sync", "maxConcurrentSync")
    if capacity > 0 and active >= capacity:
        recommendations.append("Dispatch capacity saturated; raise max_concurrent_sync or lengthen sync_interval")

    return recommendations


def generate_alerts(performance: PerformanceMetrics) -> list[SyncAlert]:
    alerts = []

    if performance.success_rate < SUCCESS_RATE_CRITICAL:
        alerts.append(SyncAlert(
            severity=AlertSeverity.CRITICAL,
            message=f"Sync success rate critically low: {performance.success_rate:.1f}%",
        ))
    elif performance.success_rate < SUCCESS_RATE_TARGET:
        alerts.append(SyncAlert(
            severity=AlertSeverity.WARNING,
            message=f"Sync success rate below target: {performance.success_rate:.1f}%",
        ))

    if performance.average_sync_time_ms > SLOW_SYNC_ALERT_MS:
        alerts.append(SyncAlert(
            severity=AlertSeverity.WARNING,
            message=f"Average sync time elevated: {performance.average_sync_time_ms / 1000:.1f}s",
        ))

    return alerts


def generate_sync_insights(
    history: Optional[Iterable[Any]],
    warehouse_metrics: Optional[Mapping[str, Any]] = None,
) -> SyncInsights:
    """Geçmiş çalıştırmalardan performans, trend, öneri ve uyarı üretir."""
    runs = _coerce_history(history)

    performance = calculate_performance(runs)
    trends = analyze_trends(runs)
    return SyncInsights(
        performance=performance,
        trends=trends,
        recommendations=generate_recommendations(performance, trends, len(runs), warehouse_metrics),
        alerts=generate_alerts(performance),
    )


def calculate_sync_metrics(
    history: Optional[Iterable[Any]],
    now: Optional[datetime] = None,
    period: timedelta = timedelta(hours=24),
) -> SyncMetrics:
    """Son `period` içindeki çalıştırmaların özet metrikleri (ürün bazlı başarı oranı)."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    since = now - period

    runs = []
    for run in _coerce_history(history):
        started = _started_at(run)
        # Zaman damgası olmayan kayıtlar pencereye dahil edilir
        if started is None or started >= since:
            runs.append(run)

    synced = sum(int(_number(r.synced_products)) for r in runs)
    failed = sum(int(_number(r.failed_products)) for r in runs)
    processed = synced + failed

    return SyncMetrics(
        total_syncs=len(runs),
        average_duration_ms=sum(_number(r.duration_ms) for r in runs) / len(runs) if runs else 0.0,
        total_products_synced=synced,
        total_products_failed=failed,
        success_rate=synced / processed * 100 if processed else 100.0,
        period=period,
    )
