"""Tests for settings, audit logging and the wired-up tracker."""

from datetime import date
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from driver_tracker import DriverTracker, create_storage, create_tracker
from driver_tracker.audit import AuditLogger, configure_logging
from driver_tracker.config import (
    DEFAULT_STORAGE_KEY,
    LoggingSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)
from driver_tracker.models import AuditEventBuilder
from driver_tracker.services.storage import (
    InMemoryKeyValueStorage,
    JsonFileKeyValueStorage,
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate every test from the caller's environment and the settings cache."""
    for name in (
        "DRIVER_TRACKER_STORAGE_BACKEND",
        "DRIVER_TRACKER_STORAGE_DATA_DIR",
        "DRIVER_TRACKER_STORAGE_KEY",
        "DRIVER_TRACKER_STORAGE_WRITE_ATTEMPTS",
        "DRIVER_TRACKER_LOG_LEVEL",
        "DRIVER_TRACKER_LOG_RENDERER",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestStorageSettings:
    """Tests for storage configuration."""

    def test_defaults(self):
        settings = StorageSettings()
        assert settings.backend == "file"
        assert settings.key == DEFAULT_STORAGE_KEY
        assert settings.write_attempts == 3

    def test_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DRIVER_TRACKER_STORAGE_BACKEND", "memory")
        monkeypatch.setenv("DRIVER_TRACKER_STORAGE_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("DRIVER_TRACKER_STORAGE_WRITE_ATTEMPTS", "5")
        settings = StorageSettings()
        assert settings.backend == "memory"
        assert settings.data_dir == tmp_path
        assert settings.write_attempts == 5

    @pytest.mark.parametrize("key", ["a/b", "a\\b", ""])
    def test_rejects_bad_key(self, key):
        with pytest.raises(ValidationError):
            StorageSettings(key=key)

    def test_rejects_out_of_range_attempts(self):
        with pytest.raises(ValidationError):
            StorageSettings(write_attempts=0)


class TestLoggingSettings:
    """Tests for logging configuration."""

    def test_level_normalized(self):
        assert LoggingSettings(level=" debug ").level == "DEBUG"

    def test_unknown_level_rejected(self):
        with pytest.raises(ValidationError):
            LoggingSettings(level="chatty")

    def test_unknown_renderer_rejected(self):
        with pytest.raises(ValidationError):
            LoggingSettings(renderer="xml")


class TestValidateAllSettings:
    """Tests for the startup check."""

    def test_all_valid(self):
        assert validate_all_settings() == {"storage": True, "logging": True}

    def test_reports_invalid_section(self, monkeypatch):
        monkeypatch.setenv("DRIVER_TRACKER_STORAGE_KEY", "nested/key")
        results = validate_all_settings()
        assert results["storage"] is False
        assert "path separators" in results["storage_error"]
        assert results["logging"] is True

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestAuditLogger:
    """Tests for audit log routing."""

    @pytest.fixture
    def structlog_logger(self, monkeypatch):
        logger = MagicMock()
        monkeypatch.setattr(
            "driver_tracker.audit.logger.structlog.get_logger",
            lambda name: logger,
        )
        return logger

    def test_level_follows_severity(self, structlog_logger):
        audit = AuditLogger()
        assert audit.log(AuditEventBuilder.day_updated(2024, 3, 5, ["performance.tips"]))
        assert audit.log(AuditEventBuilder.store_save_failed("disk full"))
        assert audit.log(AuditEventBuilder.patch_key_ignored("DailyPerformance", "mood"))
        assert audit.log(AuditEventBuilder.month_repaired(2024, 3, ["weeks.1"]))
        structlog_logger.info.assert_called_once()
        structlog_logger.error.assert_called_once()
        structlog_logger.warning.assert_called_once()
        structlog_logger.debug.assert_called_once()

    def test_fields_passed_as_structured_data(self, structlog_logger):
        AuditLogger().log_monthly_expenses_updated(2024, 3, ["rent"])
        args, kwargs = structlog_logger.info.call_args
        assert args == ("audit_event",)
        assert kwargs["event_type"] == "monthly_expenses_updated"
        assert kwargs["year"] == 2024
        assert kwargs["month"] == 3

    def test_failing_handler_does_not_raise(self, structlog_logger):
        structlog_logger.info.side_effect = RuntimeError("handler broke")
        assert AuditLogger().log(AuditEventBuilder.day_updated(2024, 3, 5, [])) is False

    def test_invalid_event_data_does_not_raise(self, structlog_logger):
        """Test event data the audit model rejects is reported, not raised."""
        audit = AuditLogger()
        audit.log_month_repaired(2024, 12, ["month"])
        structlog_logger.warning.assert_called_once()
        assert structlog_logger.warning.call_args.args == ("audit_event_invalid",)
        structlog_logger.debug.assert_not_called()

    def test_configure_logging_accepts_settings(self):
        configure_logging(LoggingSettings(level="WARNING", renderer="console"))
        configure_logging(LoggingSettings())


class TestFactories:
    """Tests for create_storage and create_tracker."""

    def test_memory_backend(self, monkeypatch):
        monkeypatch.setenv("DRIVER_TRACKER_STORAGE_BACKEND", "memory")
        assert isinstance(create_storage(Settings()), InMemoryKeyValueStorage)

    def test_file_backend(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DRIVER_TRACKER_STORAGE_DATA_DIR", str(tmp_path))
        storage = create_storage(Settings())
        assert isinstance(storage, JsonFileKeyValueStorage)
        assert storage.data_dir == tmp_path

    def test_create_tracker_with_injected_storage(self):
        storage = InMemoryKeyValueStorage()
        tracker = create_tracker(storage=storage)
        tracker.set_monthly_expenses(2024, 0, {"rent": 400})
        assert DEFAULT_STORAGE_KEY in storage

    def test_create_tracker_uses_configured_key(self, monkeypatch):
        monkeypatch.setenv("DRIVER_TRACKER_STORAGE_KEY", "other-doc")
        storage = InMemoryKeyValueStorage()
        tracker = create_tracker(storage=storage, settings=Settings())
        tracker.set_day_data(2024, 0, 1, {"performance": {"revenue": 1}})
        assert "other-doc" in storage
        assert DEFAULT_STORAGE_KEY not in storage

    def test_create_tracker_on_disk(self, monkeypatch, tmp_path):
        """Test data written by one tracker is read by a fresh one."""
        monkeypatch.setenv("DRIVER_TRACKER_STORAGE_DATA_DIR", str(tmp_path))
        create_tracker(settings=Settings()).set_day_data(
            2024, 5, 12, {"performance": {"revenue": 88}},
        )
        fresh = create_tracker(settings=Settings())
        assert fresh.get_month_data(2024, 5).days[12].performance.revenue == 88


class TestDriverTracker:
    """End-to-end use of the tracker API."""

    def test_calendar_helpers(self):
        assert DriverTracker.get_days_in_month(2024, 1) == 29
        assert DriverTracker.get_week_day_range(2024, 8, 2) == (2, 8)
        assert DriverTracker.get_day_name(2024, 8, 2) == "Mon"
        assert DriverTracker.get_current_week_index(2024, 8, date(2024, 9, 2)) == 2
        assert len(DriverTracker.get_weeks_for_month(2024, 8)) == 6

    def test_store_round_trip(self, tracker):
        store = tracker.ensure_month(tracker.get_store(), 2024, 0)
        assert tracker.save_store(store) is True
        assert tracker.get_store() == store

    def test_month_of_entries(self, tracker):
        """Test a realistic month of entries through to the yearly report."""
        tracker.set_monthly_expenses(2024, 8, {"rent": 500, "phone": 20, "svs": 200})
        for day in range(2, 30, 2):
            tracker.set_day_data(2024, 8, day, {
                "performance": {"hoursWorked": 6, "revenue": 150, "tips": 10, "ordersDelivered": 12},
                "expenses": {"food": 8, "transport": 12},
            })
        tracker.set_week_data(2024, 8, 2, {"performance": {"comment": "busy"}})

        week = tracker.compute_week_from_days(2024, 8, 2)
        assert week.performance.revenue == 4 * 150        # days 2, 4, 6, 8
        assert week.performance.comment == "busy"

        summary = tracker.compute_month_summary(2024, 8)
        assert summary.revenue == 14 * 150
        assert summary.tips == 14 * 10
        assert summary.total_hours == 14 * 6
        assert summary.total_orders == 14 * 12
        assert summary.weekly_expenses_total == 14 * 20
        assert summary.monthly_expenses_total == 720

        year = tracker.compute_year_summary(2024)
        assert year.months[8].summary == summary
        assert year.gross == pytest.approx(summary.gross)

    def test_failing_storage_never_raises(self, write_failing_storage, read_failing_storage):
        """Test reads and writes keep working, unpersisted, on a broken back end."""
        for storage in (write_failing_storage, read_failing_storage):
            tracker = create_tracker(storage=storage)
            assert tracker.get_store() == {}
            day = tracker.set_day_data(2024, 0, 1, {"performance": {"revenue": 5}})
            assert day.performance.revenue == 5
            assert tracker.compute_month_summary(2024, 0).revenue >= 0
