"""DynamoDB tablo oluşturma ve örnek veri yükleme.

3 tablo: SyncInventory, SyncHistory, ConflictReviews
"""
import os
import sys

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))
import env_loader  # noqa: E402,F401

from data_layer.stores import HISTORY_TABLE, INVENTORY_TABLE, REVIEW_TABLE, _to_dynamo  # noqa: E402

REGION = os.environ.get("AWS_DEFAULT_REGION", "us-west-2")
BOTO_CONFIG = Config(retries={"max_attempts": 3})

TABLE_DEFINITIONS = [
    {
        "TableName": INVENTORY_TABLE,
        "KeySchema": [
            {"AttributeName": "warehouse_id", "KeyType": "HASH"},
            {"AttributeName": "product_id", "KeyType": "RANGE"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "warehouse_id", "AttributeType": "S"},
            {"AttributeName": "product_id", "AttributeType": "S"},
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
    {
        "TableName": HISTORY_TABLE,
        "KeySchema": [
            {"AttributeName": "warehouse_id", "KeyType": "HASH"},
            {"AttributeName": "started_at", "KeyType": "RANGE"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "warehouse_id", "AttributeType": "S"},
            {"AttributeName": "started_at", "AttributeType": "S"},
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
    {
        "TableName": REVIEW_TABLE,
        "KeySchema": [
            {"AttributeName": "review_id", "KeyType": "HASH"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "review_id", "AttributeType": "S"},
            {"AttributeName": "status", "AttributeType": "S"},
            {"AttributeName": "created_at", "AttributeType": "S"},
        ],
        "GlobalSecondaryIndexes": [
            {
                "IndexName": "StatusTimeIndex",
                "KeySchema": [
                    {"AttributeName": "status", "KeyType": "HASH"},
                    {"AttributeName": "created_at", "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
]


def create_tables(region: str = REGION, client=None):
    """Tüm DynamoDB tablolarını oluşturur (mevcut olanları atlar)."""
    dynamodb = client or boto3.client("dynamodb", region_name=region, config=BOTO_CONFIG)

    created = []
    for table_def in TABLE_DEFINITIONS:
        table_name = table_def["TableName"]
        try:
            dynamodb.describe_table(TableName=table_name)
            print(f"  ⏭️  {table_name} zaten mevcut, atlanıyor")
        except ClientError as e:
            if e.response["Error"]["Code"] == "ResourceNotFoundException":
                print(f"  🔨 {table_name} oluşturuluyor...")
                dynamodb.create_table(**table_def)
                # Tablonun aktif olmasını bekle
                waiter = dynamodb.get_waiter("table_exists")
                waiter.wait(TableName=table_name)
                print(f"  ✓  {table_name} oluşturuldu")
                created.append(table_name)
            else:
                raise
    return created


def load_data_to_table(table_name: str, data: list, region: str = REGION, resource=None):
    """Kayıtları DynamoDB tablosuna batch write ile yükler."""
    dynamodb = resource or boto3.resource("dynamodb", region_name=region, config=BOTO_CONFIG)
    table = dynamodb.Table(table_name)
    with table.batch_writer() as batch:
        for item in data:
            batch.put_item(Item=_to_dynamo(item))
    print(f"  ✓  {table_name}: {len(data)} kayıt yüklendi")


def load_sample_data(region: str = REGION, seed: int = 42):
    """Örnek stok durumu ve çalıştırma geçmişi yükler."""
    from data_layer.generators.sync_records import generate_inventory_rows, generate_history_rows

    print("\n📤 DynamoDB'ye örnek veri yükleniyor...\n")
    load_data_to_table(INVENTORY_TABLE, generate_inventory_rows(seed=seed), region)
    load_data_to_table(HISTORY_TABLE, generate_history_rows(seed=seed), region)
    print("\n✅ Örnek veriler yüklendi!")


def delete_tables(region: str = REGION, client=None):
    """Tüm tabloları siler (dikkatli kullan)."""
    dynamodb = client or boto3.client("dynamodb", region_name=region, config=BOTO_CONFIG)
    for table_def in TABLE_DEFINITIONS:
        table_name = table_def["TableName"]
        try:
            dynamodb.delete_table(TableName=table_name)
            print(f"  🗑️  {table_name} silindi")
        except ClientError:
            print(f"  ⏭️  {table_name} bulunamadı, atlanıyor")


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "--delete":
        print("🗑️  Tablolar siliniyor...")
        delete_tables()
    else:
        print("🏗️  DynamoDB tabloları oluşturuluyor...\n")
        create_tables()
        load_sample_data()
