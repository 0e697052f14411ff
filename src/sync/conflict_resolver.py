"""Yerel ve uzak envanter kayıtları arasındaki çakışmaları çözer."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Union

from src.models.sync import (
    ConflictResolutionResult,
    ConflictStrategy,
    InventoryItem,
    SyncConfiguration,
    SyncPriority,
)
from src.sync.priority import DEFAULT_PRIORITY

logger = logging.getLogger(__name__)


def _item_priority(item: InventoryItem) -> SyncPriority:
    metadata = item.metadata if isinstance(item.metadata, dict) else {}
    return SyncPriority.parse(metadata.get("priority"), DEFAULT_PRIORITY)


def _timestamp(item: InventoryItem) -> datetime:
    moment = item.last_updated
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def _last_write_wins(local: InventoryItem, remote: InventoryItem) -> ConflictResolutionResult:
    # Eşit zaman damgasında yerel kayıt kazanır
    winner = remote if _timestamp(remote) > _timestamp(local) else local
    side = "remote" if winner is remote else "local"
    return ConflictResolutionResult(
        resolved=winner,
        strategy=ConflictStrategy.LAST_WRITE_WINS,
        reason=f"Selected {side} data with latest timestamp: {winner.last_updated.isoformat()}",
        requires_manual_review=False,
    )


def _priority_based(local: InventoryItem, remote: InventoryItem) -> ConflictResolutionResult:
    local_priority = _item_priority(local)
    remote_priority = _item_priority(remote)

    if local_priority.weight == remote_priority.weight:
        return ConflictResolutionResult(
            resolved=local,
            strategy=ConflictStrategy.PRIORITY_BASED,
            reason=f"Equal priority ({local_priority.value}) on both sides, keeping local pending review",
            requires_manual_review=True,
        )

    winner, winner_priority = (
        (local, local_priority) if local_priority.weight > remote_priority.weight else (remote, remote_priority)
    )
    side = "local" if winner is local else "remote"
    return ConflictResolutionResult(
        resolved=winner,
        strategy=ConflictStrategy.PRIORITY_BASED,
        reason=f"Selected {side} data with higher priority: {winner_priority.value}",
        requires_manual_review=False,
    )


def _manual(local: InventoryItem) -> ConflictResolutionResult:
    # Yerel değer sadece yer tutucu, insan onayı gelene kadar yetkili değil
    return ConflictResolutionResult(
        resolved=local,
        strategy=ConflictStrategy.MANUAL,
        reason="Conflict requires manual resolution",
        requires_manual_review=True,
    )


def resolve_conflict(
    local: InventoryItem,
    remote: InventoryItem,
    strategy: Union[ConflictStrategy, str],
) -> ConflictResolutionResult:
    """Stratejiye göre yetkili kaydı seçer. Bilinmeyen strateji MANUAL gibi davranır."""
    try:
        strategy = ConflictStrategy(strategy)
    except ValueError:
        logger.warning("Bilinmeyen çakışma stratejisi %r, MANUAL uygulanıyor", strategy)
        strategy = ConflictStrategy.MANUAL

    if strategy is ConflictStrategy.LAST_WRITE_WINS:
        result = _last_write_wins(local, remote)
    elif strategy is ConflictStrategy.PRIORITY_BASED:
        result = _priority_based(local, remote)
    else:
        result = _manual(local)

    logger.debug(
        "Çakışma çözüldü: ürün=%s, strateji=%s, manuel_inceleme=%s",
        local.product_id, result.strategy.value, result.requires_manual_review,
    )
    return result


def resolve_with_config(
    local: InventoryItem, remote: InventoryItem, config: SyncConfiguration
) -> ConflictResolutionResult:
    """Konfigürasyondaki stratejiyi uygular; otomatik çözüm kapalıysa MANUAL'a düşer."""
    strategy = config.conflict_resolution if config.auto_resolve_conflicts else ConflictStrategy.MANUAL
    return resolve_conflict(local, remote, strategy)
