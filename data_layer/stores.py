"""DynamoDB tabanlı senkronizasyon kolaboratörleri.

Motor bu sınıfları import etmez; sadece sözleşmelerine (lookup fonksiyonu,
geçmiş listesi, çözüm uygulama) uyan çağrılar alır.

- InventoryStore: (product_id, warehouse_id) ile InventoryItem okur
- SyncHistoryStore: çalıştırma geçmişini okur/yazar (analitik girdisi)
- ResolutionStore: çakışma çözümünü uygular, gerekiyorsa manuel incelemeye kuyruğa atar
"""

from __future__ import annotations

import json
import logging
import os
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

from src.models.sync import (
    ConflictResolutionResult,
    ConflictStrategy,
    InventoryItem,
    InventoryStatus,
    SyncRun,
)
from src.sync.validator import parse_timestamp

logger = logging.getLogger(__name__)

REGION = os.environ.get("AWS_DEFAULT_REGION", "us-west-2")

INVENTORY_TABLE = "SyncInventory"
HISTORY_TABLE = "SyncHistory"
REVIEW_TABLE = "ConflictReviews"


def _to_python(obj: Any) -> Any:
    """Decimal ve iç içe yapıları JSON uyumlu tiplere çevirir."""
    if isinstance(obj, Decimal):
        return int(obj) if obj == int(obj) else float(obj)
    if isinstance(obj, dict):
        return {k: _to_python(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_to_python(i) for i in obj]
    return obj


def _to_dynamo(obj: Any) -> Any:
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, dict):
        return {k: _to_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_to_dynamo(i) for i in obj]
    return obj


def _resource(dynamodb_resource: Optional[Any], region_name: str) -> Any:
    return dynamodb_resource or boto3.resource("dynamodb", region_name=region_name)


def item_from_dynamo(raw: dict) -> Optional[InventoryItem]:
    raw = _to_python(raw)
    try:
        status = InventoryStatus(raw.get("status", InventoryStatus.IN_STOCK.value))
    except ValueError:
        logger.warning("Bilinmeyen stok durumu: %s", raw.get("status"))
        return None
    last_updated = parse_timestamp(raw.get("last_updated"))
    if last_updated is None:
        logger.warning("Stok kaydında geçersiz last_updated: %s", raw.get("last_updated"))
        return None
    metadata = raw.get("metadata") or {}
    if isinstance(metadata, str):
        metadata = json.loads(metadata)
    return InventoryItem(
        product_id=raw["product_id"],
        warehouse_id=raw["warehouse_id"],
        status=status,
        last_updated=last_updated,
        quantity=int(raw.get("quantity", 0)),
        metadata=metadata,
    )


def item_to_dynamo(item: InventoryItem) -> dict:
    return _to_dynamo({
        "warehouse_id": item.warehouse_id,
        "product_id": item.product_id,
        "status": item.status.value,
        "last_updated": item.last_updated.isoformat(),
        "quantity": item.quantity,
        "metadata": dict(item.metadata or {}),
    })


class InventoryStore:
    """SyncInventory tablosundan stok durumu okur."""

    def __init__(self, dynamodb_resource: Optional[Any] = None, region_name: str = REGION):
        self.table = _resource(dynamodb_resource, region_name).Table(INVENTORY_TABLE)

    def get_item(self, product_id: str, warehouse_id: str) -> Optional[InventoryItem]:
        """prepare_warehouse_sync'e inventory_lookup olarak verilebilir."""
        try:
            response = self.table.get_item(Key={"warehouse_id": warehouse_id, "product_id": product_id})
        except ClientError as e:
            logger.error("Stok okuma hatası (%s/%s): %s", warehouse_id, product_id, e)
            return None
        raw = response.get("Item")
        return item_from_dynamo(raw) if raw else None

    def put_item(self, item: InventoryItem) -> None:
        self.table.put_item(Item=item_to_dynamo(item))


class SyncHistoryStore:
    """SyncHistory tablosu: PK=warehouse_id, SK=started_at (ISO 8601)."""

    def __init__(self, dynamodb_resource: Optional[Any] = None, region_name: str = REGION):
        self.table = _resource(dynamodb_resource, region_name).Table(HISTORY_TABLE)

    def record_run(self, warehouse_id: str, run: SyncRun) -> None:
        started_at = run.started_at or datetime.now(timezone.utc)
        self.table.put_item(Item=_to_dynamo({
            "warehouse_id": warehouse_id,
            "started_at": started_at.isoformat(),
            "status": run.status_value,
            "duration_ms": float(run.duration_ms),
            "synced_products": run.synced_products,
            "failed_products": run.failed_products,
        }))

    def list_runs(self, warehouse_id: str, since: Optional[datetime] = None) -> list[SyncRun]:
        """Depo geçmişini döndürür; okuma hatasında boş liste (panel çökmesin)."""
        condition = Key("warehouse_id").eq(warehouse_id)
        if since is not None:
            condition = condition & Key("started_at").gte(since.isoformat())

        items: list[dict] = []
        kwargs: dict = {"KeyConditionExpression": condition}
        try:
            while True:
                response = self.table.query(**kwargs)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                kwargs["ExclusiveStartKey"] = last_key
        except ClientError as e:
            logger.error("Senkronizasyon geçmişi sorgulama hatası (%s): %s", warehouse_id, e)
            return []

        runs = []
        for raw in items:
            raw = _to_python(raw)
            runs.append(SyncRun(
                status=str(raw.get("status", "UNKNOWN")),
                duration_ms=float(raw.get("duration_ms", 0)),
                synced_products=int(raw.get("synced_products", 0)),
                failed_products=int(raw.get("failed_products", 0)),
                started_at=parse_timestamp(raw.get("started_at")),
                warehouse_id=raw.get("warehouse_id"),
            ))
        return runs


class ResolutionStore:
    """Çakışma çözümlerini kalıcı hale getirir."""

    def __init__(self, dynamodb_resource: Optional[Any] = None, region_name: str = REGION):
        dynamodb = _resource(dynamodb_resource, region_name)
        self.inventory_table = dynamodb.Table(INVENTORY_TABLE)
        self.review_table = dynamodb.Table(REVIEW_TABLE)

    def apply_resolution(self, result: ConflictResolutionResult, warehouse_id: str) -> Optional[str]:
        """Kazanan kaydı yazar; manuel inceleme gerekiyorsa kuyruğa ekler.

        MANUAL stratejisinde yerel değer yetkili değildir, bu yüzden stok
        tablosuna yazılmaz, sadece kuyruğa girer. Kuyruk ID'si döner.
        """
        resolved = result.resolved
        try:
            if not (result.requires_manual_review and result.strategy is ConflictStrategy.MANUAL):
                self.inventory_table.put_item(Item=item_to_dynamo(resolved))

            if not result.requires_manual_review:
                return None

            review_id = str(uuid.uuid4())
            self.review_table.put_item(Item=_to_dynamo({
                "review_id": review_id,
                "warehouse_id": warehouse_id,
                "product_id": resolved.product_id,
                "strategy": result.strategy.value,
                "reason": result.reason,
                "candidate": json.dumps(_to_python(item_to_dynamo(resolved)), default=str),
                "status": "PENDING",
                "created_at": datetime.now(timezone.utc).isoformat(),
            }))
            logger.info("Çakışma manuel incelemeye alındı: %s (%s)", review_id, resolved.product_id)
            return review_id
        except ClientError as e:
            logger.error("Çakışma çözümü kaydedilemedi (%s): %s", resolved.product_id, e)
            raise
