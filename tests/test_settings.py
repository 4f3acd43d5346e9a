import pytest

from task_api.models import Priority
from task_api.settings import get_settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in [
            "PERSISTENCE_BACKEND",
            "SQLITE_DB_PATH",
            "CORS_ALLOW_ORIGINS",
            "SEED_SAMPLE_DATA",
            "LOG_LEVEL",
            "LOG_FORMAT",
            "HOST",
            "PORT",
        ]:
            monkeypatch.delenv(name, raising=False)
        s = get_settings()
        assert s.persistence_backend == "memory"
        assert s.sqlite_db_path == "./data/tasks.db"
        assert s.cors_allow_origins == ["*"]
        assert s.seed_sample_data is True
        assert s.log_level == "INFO"
        assert s.log_format == "console"
        assert s.port == 8000

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("PERSISTENCE_BACKEND", "SQLite")
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://localhost:3000, http://localhost:5173")
        monkeypatch.setenv("SEED_SAMPLE_DATA", "off")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("LOG_FORMAT", "json")
        monkeypatch.setenv("PORT", "9001")
        s = get_settings()
        assert s.persistence_backend == "sqlite"
        assert s.cors_allow_origins == ["http://localhost:3000", "http://localhost:5173"]
        assert s.seed_sample_data is False
        assert s.log_level == "DEBUG"
        assert s.log_format == "json"
        assert s.port == 9001

    def test_unsupported_values_fall_back(self, monkeypatch):
        monkeypatch.setenv("PERSISTENCE_BACKEND", "postgres")
        monkeypatch.setenv("LOG_FORMAT", "xml")
        monkeypatch.setenv("PORT", "not-a-port")
        s = get_settings()
        assert s.persistence_backend == "memory"
        assert s.log_format == "console"
        assert s.port == 8000


class TestPriorityParsing:
    @pytest.mark.parametrize(
        "raw, expected",
        [(1, Priority.LOW), ("2", Priority.MEDIUM), ("high", Priority.HIGH), (" Low ", Priority.LOW)],
    )
    def test_accepted(self, raw, expected):
        assert Priority.parse(raw) is expected

    @pytest.mark.parametrize("raw", [0, 4, "urgent", "", True])
    def test_rejected(self, raw):
        with pytest.raises(ValueError):
            Priority.parse(raw)
