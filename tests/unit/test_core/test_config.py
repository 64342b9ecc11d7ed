"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from employee_api.core.config import Settings, get_settings


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self) -> None:
        settings = Settings(database_url="sqlite+aiosqlite:///:memory:")
        assert settings.export_worker_count == 2
        assert settings.export_queue_size == 1000
        assert settings.export_max_page_size == 10000
        assert settings.export_min_estimate_seconds == 5
        assert settings.export_records_per_second == 1000
        assert settings.log_level == "INFO"
        assert settings.api_v1_prefix == "/api/v1"

    def test_worker_count_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            Settings(database_url="sqlite+aiosqlite:///:memory:", export_worker_count=0)

    def test_valid_schema_name(self) -> None:
        settings = Settings(database_url="sqlite+aiosqlite:///:memory:", database_schema="pr_42")
        assert settings.database_schema == "pr_42"

    def test_invalid_schema_name(self) -> None:
        with pytest.raises(ValidationError, match="database_schema"):
            Settings(database_url="sqlite+aiosqlite:///:memory:", database_schema="Bad-Schema;")

    def test_cors_origin_list(self) -> None:
        settings = Settings(
            database_url="sqlite+aiosqlite:///:memory:",
            cors_origins=" https://a.example , ,https://b.example",
        )
        assert settings.cors_origin_list == ["https://a.example", "https://b.example"]

    def test_cors_origin_list_empty(self) -> None:
        assert Settings(database_url="sqlite+aiosqlite:///:memory:").cors_origin_list == []

    def test_get_settings_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///env.db")
        monkeypatch.setenv("EXPORT_WORKER_COUNT", "4")
        settings = get_settings()
        assert settings.database_url == "sqlite+aiosqlite:///env.db"
        assert settings.export_worker_count == 4
