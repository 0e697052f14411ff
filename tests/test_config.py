"""Konfigürasyon yükleyici unit testleri."""

import pytest

from src.models.sync import ConflictStrategy, SyncConfiguration, SyncPriority
from src.sync.config import ConfigurationError, build_configuration, load_sync_configuration


class TestDefaults:

    def test_defaults_without_sources(self):
        config = load_sync_configuration(environ={})
        assert config == SyncConfiguration()
        assert config.batch_size == 10
        assert config.timeout_ms == 30_000
        assert config.max_retry_attempts == 3
        assert config.conflict_resolution is ConflictStrategy.LAST_WRITE_WINS
        assert config.sync_interval_ms == 300_000
        assert config.max_concurrent_sync == 4


class TestSources:
    """YAML < ortam değişkeni < override önceliği."""

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "sync.yaml"
        path.write_text(
            "sync:\n"
            "  batchSize: 25\n"
            "  conflictResolution: priority_based\n"
            "  autoResolveConflicts: false\n"
            "  priorityOverrides:\n"
            "    sku-1: critical\n",
            encoding="utf-8",
        )
        config = load_sync_configuration(path, environ={})
        assert config.batch_size == 25
        assert config.conflict_resolution is ConflictStrategy.PRIORITY_BASED
        assert config.auto_resolve_conflicts is False
        assert config.priority_overrides == {"sku-1": SyncPriority.CRITICAL}

    def test_path_from_environment(self, tmp_path):
        path = tmp_path / "sync.yaml"
        path.write_text("batch_size: 7\n", encoding="utf-8")
        config = load_sync_configuration(environ={"SYNC_CONFIG_PATH": str(path)})
        assert config.batch_size == 7

    def test_environment_overrides_file(self, tmp_path):
        path = tmp_path / "sync.yaml"
        path.write_text("batch_size: 7\ntimeout_ms: 5000\n", encoding="utf-8")
        environ = {"SYNC_BATCH_SIZE": "12", "SYNC_ENABLE_CROSS_WAREHOUSE": "no"}
        config = load_sync_configuration(path, environ=environ)
        assert config.batch_size == 12
        assert config.timeout_ms == 5000
        assert config.enable_cross_warehouse_sync is False

    def test_explicit_overrides_win(self):
        config = load_sync_configuration(
            overrides={"batchSize": 3}, environ={"SYNC_BATCH_SIZE": "12"}
        )
        assert config.batch_size == 3

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_sync_configuration(path, environ={}) == SyncConfiguration()


class TestValidation:
    """Geçersiz değerler tek ConfigurationError içinde toplanır."""

    def test_errors_aggregated(self):
        with pytest.raises(ConfigurationError) as exc_info:
            build_configuration({"batch_size": 0, "timeout_ms": 10, "max_retry_attempts": 11})
        assert len(exc_info.value.errors) == 3

    def test_unknown_strategy(self):
        with pytest.raises(ConfigurationError) as exc_info:
            build_configuration({"conflictResolution": "COIN_FLIP"})
        assert "conflict_resolution" in exc_info.value.errors[0]

    def test_non_integer(self):
        with pytest.raises(ConfigurationError):
            build_configuration({"batch_size": "ten"})

    def test_bad_boolean(self):
        with pytest.raises(ConfigurationError):
            build_configuration({"auto_resolve_conflicts": "maybe"})

    def test_sync_interval_minimum(self):
        with pytest.raises(ConfigurationError):
            build_configuration({"syncInterval": 1000})
        assert build_configuration({"syncInterval": 60_000}).sync_interval_ms == 60_000

    def test_bad_priority_override(self):
        with pytest.raises(ConfigurationError):
            build_configuration({"priority_overrides": {"sku-1": "URGENT"}})

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_sync_configuration(path, environ={})

    def test_is_value_error(self):
        assert issubclass(ConfigurationError, ValueError)

    def test_unknown_keys_ignored(self):
        assert build_configuration({"color": "blue"}) == SyncConfiguration()
