from src.sync.analytics import calculate_sync_metrics, generate_sync_insights
from src.sync.batch_planner import plan_batches
from src.sync.config import ConfigurationError, load_sync_configuration
from src.sync.conflict_resolver import resolve_conflict, resolve_with_config
from src.sync.coordinator import (
    determine_sync_status,
    next_bulk_sync_window,
    next_sync_window,
    prepare_warehouse_sync,
)
from src.sync.priority import calculate_sync_priority, escalate
from src.sync.scheduler import schedule_cross_warehouse_sync
from src.sync.validator import validate_sync_records

__all__ = [
    "ConfigurationError",
    "calculate_sync_metrics",
    "calculate_sync_priority",
    "determine_sync_status",
    "escalate",
    "generate_sync_insights",
    "load_sync_configuration",
    "next_bulk_sync_window",
    "next_sync_window",
    "plan_batches",
    "prepare_warehouse_sync",
    "resolve_conflict",
    "resolve_with_config",
    "schedule_cross_warehouse_sync",
    "validate_sync_records",
]
