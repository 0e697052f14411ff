"""Geçerli kayıtları öncelik sıralı, boyutu sınırlı batch'lere böler."""

from __future__ import annotations

import logging
import uuid
from collections import Counter
from typing import Iterable, Optional, Sequence

from src.models.sync import ProductSyncRecord, SyncBatch, SyncConfiguration, SyncPriority
from src.sync.priority import DEFAULT_PRIORITY, escalate

logger = logging.getLogger(__name__)

BASE_TIME_PER_PRODUCT_MS = 100
BATCH_OVERHEAD_MS = 500
COMPLEX_BATCH_MULTIPLIER = 1.5
# Bu farkın üstündeki öncelik sıçraması yeni batch başlatır (MEDIUM->CRITICAL evet, MEDIUM->HIGH hayır)
PRIORITY_GAP_THRESHOLD = 25


def record_priority(record: ProductSyncRecord, config: SyncConfiguration) -> SyncPriority:
    """Planlama önceliği: konfigürasyon override'ı > metadata.priority > MEDIUM."""
    override = config.priority_overrides.get(record.product_id) if config.priority_overrides else None
    if override is not None:
        return SyncPriority.parse(override, DEFAULT_PRIORITY)
    return SyncPriority.parse(record.meta("priority"), DEFAULT_PRIORITY)


def is_significant_jump(current: SyncPriority, new: SyncPriority) -> bool:
    return abs(current.weight - new.weight) > PRIORITY_GAP_THRESHOLD


def estimate_batch_duration_ms(products: Sequence[ProductSyncRecord]) -> int:
    """Ürün başına süre × karmaşıklık çarpanı + batch başına sabit ek süre."""
    multiplier = COMPLEX_BATCH_MULTIPLIER if any(p.meta("isComplex") is True for p in products) else 1.0
    return int(round(len(products) * BASE_TIME_PER_PRODUCT_MS * multiplier + BATCH_OVERHEAD_MS))


def determine_batch_region(products: Iterable[ProductSyncRecord]) -> Optional[str]:
    """En sık görülen bölge; eşitlikte ilk görülen kazanır."""
    counts = Counter(p.meta("region") for p in products if p.meta("region"))
    if not counts:
        return None
    # most_common eşit sayılarda ilk eklenme sırasını korur
    return counts.most_common(1)[0][0]


def generate_batch_id() -> str:
    return f"batch_{uuid.uuid4().hex}"


def _close_batch(products: list[ProductSyncRecord], priority: SyncPriority) -> SyncBatch:
    return SyncBatch(
        batch_id=generate_batch_id(),
        products=tuple(products),
        priority=priority,
        estimated_duration_ms=estimate_batch_duration_ms(products),
        region=determine_batch_region(products),
    )


def plan_batches(records: Sequence[ProductSyncRecord], config: SyncConfiguration) -> list[SyncBatch]:
    """Kayıtları önceliğe göre (stabil) sıralayıp batch'lere böler.

    Yeni batch açılır: mevcut batch dolduğunda veya sıradaki kaydın ağırlığı
    batch önceliğinden 25'ten fazla farklı olduğunda. Hiçbir kayıt düşmez
    veya tekrarlanmaz.
    """
    scored = [(record, record_priority(record, config)) for record in records]
    # sorted() stabildir, eşit ağırlıklarda giriş sırası korunur
    scored = sorted(scored, key=lambda pair: pair[1].weight, reverse=True)

    batches: list[SyncBatch] = []
    current: list[ProductSyncRecord] = []
    current_priority = SyncPriority.LOW

    for record, priority in scored:
        if current and (
            len(current) >= config.batch_size or is_significant_jump(current_priority, priority)
        ):
            batches.append(_close_batch(current, current_priority))
            current = []

        if not current:
            current_priority = priority
        current.append(record)
        current_priority = escalate(current_priority, priority)

    if current:
        batches.append(_close_batch(current, current_priority))

    logger.debug(
        "%d kayıt %d batch'e bölündü (batch_size=%d)",
        len(scored), len(batches), config.batch_size,
    )
    return batches
