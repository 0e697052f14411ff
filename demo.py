"""
Envanter Senkronizasyon Motoru Demo Script'i.

Kullanım:
    python demo.py                  # yerel, AWS gerektirmez
    python demo.py --dynamodb       # stok durumu ve geçmişi DynamoDB'den okur

Opsiyonel:
    export SYNC_CONFIG_PATH="sync.yaml"
    export SYNC_BATCH_SIZE=10
"""

import logging
import sys
from datetime import datetime, timedelta, timezone

import env_loader  # noqa: F401

from data_layer.generators.sync_records import (
    generate_history_rows,
    generate_inventory_rows,
    generate_sync_records,
)
from src.models.sync import InventoryItem, InventoryStatus
from src.sync import (
    ConfigurationError,
    generate_sync_insights,
    load_sync_configuration,
    prepare_warehouse_sync,
    resolve_with_config,
)

SOURCE_WAREHOUSE = "us-warehouse"


def load_config():
    """Konfigürasyonu yükler, hatalıysa çıkar."""
    try:
        config = load_sync_configuration()
    except ConfigurationError as e:
        print("❌ Konfigürasyon hatası:")
        for error in e.errors:
            print(f"   - {error}")
        sys.exit(1)
    print(f"✅ Konfigürasyon: batch_size={config.batch_size}, strateji={config.conflict_resolution.value}")
    return config


def local_inventory_lookup():
    """Örnek stok satırlarından bellek içi lookup fonksiyonu üretir."""
    from data_layer.stores import item_from_dynamo

    items = {}
    for row in generate_inventory_rows():
        item = item_from_dynamo(row)
        if item:
            items[(item.product_id, item.warehouse_id)] = item
    return lambda product_id, warehouse_id: items.get((product_id, warehouse_id))


def show_plan(plan):
    print("\n🔎 Adım 1: Validasyon")
    summary = plan.validation.summary
    print(f"   Toplam={summary.total}, geçerli={summary.valid}, geçersiz={summary.invalid}, uyarı={summary.warning_count}")
    for invalid in plan.validation.invalid_records:
        print(f"   ❌ {getattr(invalid.record, 'product_id', invalid.record)}: {'; '.join(invalid.errors)}")
    for warning in plan.validation.warnings[:5]:
        print(f"   ⚠️  {warning}")

    print("\n📦 Adım 2: Batch Planı")
    for batch in plan.batches:
        print(
            f"   {batch.batch_id[:14]}… öncelik={batch.priority.value:<8} ürün={len(batch):<3} "
            f"süre≈{batch.estimated_duration_ms}ms bölge={batch.region or '-'}"
        )

    print("\n🌍 Adım 3: Depolar Arası Sıra")
    for entry in plan.cross_warehouse:
        print(
            f"   {entry.warehouse_id:<20} skor={entry.priority_score:<7} "
            f"pencere={entry.sync_window.value:<15} gecikme≈{entry.estimated_delay_ms}ms"
        )
    print(f"\n   Sonraki senkronizasyon: {plan.next_sync_window.isoformat()}")


def show_conflict(config):
    print("\n⚖️  Adım 4: Çakışma Çözümü")
    now = datetime.now(timezone.utc)
    local = InventoryItem("demo-product", SOURCE_WAREHOUSE, InventoryStatus.LOW_STOCK, now, 12, {"priority": "HIGH"})
    remote = InventoryItem("demo-product", "japan-warehouse", InventoryStatus.IN_STOCK, now - timedelta(minutes=3), 40)
    result = resolve_with_config(local, remote, config)
    print(f"   Strateji: {result.strategy.value}")
    print(f"   Kazanan: {result.resolved.warehouse_id} (miktar={result.resolved.quantity})")
    print(f"   Gerekçe: {result.reason}")
    print(f"   Manuel inceleme: {'evet' if result.requires_manual_review else 'hayır'}")


def show_insights(history, metrics=None):
    print("\n📊 Adım 5: Senkronizasyon Analitiği")
    insights = generate_sync_insights(history, metrics)
    perf = insights.performance
    print(f"   Başarı oranı: {perf.success_rate:.1f}%")
    print(f"   Ortalama süre: {perf.average_sync_time_ms / 1000:.1f}s")
    print(f"   Verim: {perf.throughput:.0f} ürün/saat")
    print(f"   Trend: sıklık={insights.trends.sync_frequency.value}, hata={insights.trends.error_rate.value}")
    print(f"   Yoğun saatler (UTC): {insights.trends.peak_hours}")
    for alert in insights.alerts:
        print(f"   🚨 [{alert.severity.value}] {alert.message}")
    for rec in insights.recommendations:
        print(f"   💡 {rec}")


def run_local():
    config = load_config()
    plan = prepare_warehouse_sync(
        generate_sync_records(),
        SOURCE_WAREHOUSE,
        config,
        inventory_lookup=local_inventory_lookup(),
    )
    show_plan(plan)
    show_conflict(config)
    history = [row for row in generate_history_rows() if row["warehouse_id"] == SOURCE_WAREHOUSE]
    show_insights(history, {"manual_review_backlog": 2})


def run_dynamodb():
    from data_layer.stores import InventoryStore, SyncHistoryStore

    config = load_config()
    inventory = InventoryStore()
    plan = prepare_warehouse_sync(
        generate_sync_records(),
        SOURCE_WAREHOUSE,
        config,
        inventory_lookup=inventory.get_item,
    )
    show_plan(plan)
    show_conflict(config)
    since = datetime.now(timezone.utc) - timedelta(days=7)
    show_insights(SyncHistoryStore().list_runs(SOURCE_WAREHOUSE, since=since))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    print("🏭 Multi-Warehouse Inventory Sync Engine - Demo")
    print("=" * 60)

    if len(sys.argv) > 1 and sys.argv[1] == "--dynamodb":
        run_dynamodb()
    else:
        run_local()

    print("\n" + "=" * 60)
    print("🎉 Demo tamamlandı!")
