"""Tests for settings and the audit logger."""

import pytest
from structlog.testing import capture_logs

from price_ledger.audit import AuditLogger
from price_ledger.config import AppSettings, StoreSettings, get_settings, validate_all_settings
from price_ledger.models.audit import AuditEventBuilder
from tests.conftest import make_record


class TestStoreSettings:
    """Tests for StoreSettings."""

    def test_defaults(self, monkeypatch):
        """Test the out-of-the-box file names."""
        for name in ("PRICE_LEDGER_STORE_PATH", "PRICE_LEDGER_EXPORT_PATH", "PRICE_LEDGER_ATOMIC_WRITES"):
            monkeypatch.delenv(name, raising=False)
        settings = StoreSettings(_env_file=None)
        assert settings.store_path == "prices.csv"
        assert settings.export_path == "export.csv"
        assert settings.atomic_writes is False

    def test_env_override(self, monkeypatch):
        """Test PRICE_LEDGER_* environment variables."""
        monkeypatch.setenv("PRICE_LEDGER_STORE_PATH", "data/ledger.csv")
        monkeypatch.setenv("PRICE_LEDGER_ATOMIC_WRITES", "1")
        settings = StoreSettings(_env_file=None)
        assert settings.store_path == "data/ledger.csv"
        assert settings.atomic_writes is True

    def test_empty_store_path_rejected(self):
        """Test that an empty path is a configuration error."""
        with pytest.raises(ValueError):
            StoreSettings(_env_file=None, store_path="")


class TestAppSettings:
    """Tests for AppSettings."""

    def test_log_level_normalized(self):
        """Test that level names are upper-cased."""
        assert AppSettings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        """Test that a made-up level fails validation."""
        with pytest.raises(ValueError):
            AppSettings(_env_file=None, log_level="chatty")

    def test_debug_mode_forces_debug_level(self):
        """Test effective_log_level."""
        settings = AppSettings(_env_file=None, log_level="WARNING", debug_mode=True)
        assert settings.effective_log_level == "DEBUG"


class TestSettingsContainer:
    """Tests for the root container helpers."""

    def test_get_settings_is_cached(self):
        """Test that the root settings object is reused."""
        assert get_settings() is get_settings()

    def test_validate_all_settings(self, monkeypatch):
        """Test the status report used by the settings page."""
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        status = validate_all_settings()
        assert status["store"] is True
        assert status["app"] is True

    def test_validate_all_settings_reports_errors(self, monkeypatch):
        """Test that a bad value is reported, not raised."""
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        status = validate_all_settings()
        assert status["app"] is False
        assert "app_error" in status


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_logs_at_event_severity(self):
        """Test that events are emitted at their own level."""
        with capture_logs() as logs:
            audit = AuditLogger()
            assert audit.log(AuditEventBuilder.system_error("X", "boom")) is True
            audit.log_record_added("prices.csv", make_record(), 2)

        assert [log["log_level"] for log in logs] == ["error", "info"]
        assert logs[1]["event_type"] == "record_added"
        assert logs[1]["position"] == 2
        assert logs[1]["details"]["price"] == "1.99"

    def test_helpers_emit_expected_types(self):
        """Test the typed helper methods."""
        with capture_logs() as logs:
            audit = AuditLogger()
            audit.log_record_deleted("prices.csv", make_record(), 0)
            audit.log_records_exported("prices.csv", "export.csv", "snacks", 3)
            audit.log_query_executed("cheapest", "", 1)
            audit.log_error("StoreReadError", "cannot open")

        assert [log["event_type"] for log in logs] == [
            "record_deleted",
            "records_exported",
            "query_executed",
            "system_error",
        ]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
