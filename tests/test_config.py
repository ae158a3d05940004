"""
Postboard — Configuration Tests
=================================

What:  Settings parsing and the fail-fast loader.
"""

import pytest

from postboard.config import Settings, load_settings


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run from an empty directory so no .env file is picked up."""
    monkeypatch.chdir(tmp_path)
    return monkeypatch


class TestLoadSettings:

    def test_loads_from_environment(self, clean_env):
        settings = load_settings()
        assert settings.port == 8000
        assert settings.jwt_expires_days == 30
        assert settings.is_sqlite

    @pytest.mark.parametrize("variable", ["DATABASE_URL", "PORT", "JWT_SECRET_KEY"])
    def test_missing_required_variable_exits(self, clean_env, variable):
        clean_env.delenv(variable)
        with pytest.raises(SystemExit) as exc_info:
            load_settings()
        assert exc_info.value.code == 1

    def test_invalid_port_exits(self, clean_env):
        clean_env.setenv("PORT", "not-a-port")
        with pytest.raises(SystemExit):
            load_settings()


class TestSettings:

    def test_log_level_is_normalized(self):
        settings = Settings(
            database_url="sqlite+aiosqlite:///:memory:",
            port=1,
            jwt_secret_key="k",
            log_level="debug",
        )
        assert settings.log_level == "DEBUG"

    def test_cors_origins_list(self):
        settings = Settings(
            database_url="postgresql+asyncpg://u:p@db/postboard",
            port=1,
            jwt_secret_key="k",
            cors_origins="http://a.test, http://b.test",
        )
        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]
        assert not settings.is_sqlite
