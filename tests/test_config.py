"""Unit tests for core/config.py -- Settings defaults, env overrides, validation."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from core.config import Settings, get_settings


@pytest.fixture
def clean_env(monkeypatch):
    """Strip CREDFILE_* overrides (conftest sets the bcrypt cost) for default checks."""
    for name in (
        "CREDFILE_BCRYPT_ROUNDS",
        "CREDFILE_STORE_PATH",
        "CREDFILE_SESSION_TTL_SECONDS",
        "CREDFILE_ATOMIC_REWRITE",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    def test_defaults(self, clean_env) -> None:
        settings = Settings(_env_file=None)
        assert settings.store_path == Path("credentials.suc")
        assert settings.session_ttl_seconds == 3600
        assert settings.bcrypt_rounds == 12
        assert settings.atomic_rewrite is False

    def test_env_overrides(self, clean_env, monkeypatch) -> None:
        monkeypatch.setenv("CREDFILE_STORE_PATH", "/var/lib/app/users.suc")
        monkeypatch.setenv("CREDFILE_SESSION_TTL_SECONDS", "900")
        monkeypatch.setenv("CREDFILE_BCRYPT_ROUNDS", "10")
        monkeypatch.setenv("CREDFILE_ATOMIC_REWRITE", "true")
        settings = Settings(_env_file=None)
        assert settings.store_path == Path("/var/lib/app/users.suc")
        assert settings.session_ttl_seconds == 900
        assert settings.bcrypt_rounds == 10
        assert settings.atomic_rewrite is True

    @pytest.mark.parametrize("rounds", [3, 32])
    def test_rounds_out_of_range(self, rounds: int) -> None:
        with pytest.raises(ValidationError):
            Settings(bcrypt_rounds=rounds)

    @pytest.mark.parametrize("ttl", [0, -60])
    def test_non_positive_ttl(self, ttl: int) -> None:
        with pytest.raises(ValidationError):
            Settings(session_ttl_seconds=ttl)

    def test_low_rounds_warns(self, caplog) -> None:
        with caplog.at_level("WARNING", logger="credfile.config"):
            Settings(bcrypt_rounds=4)
        assert "below" in caplog.text

    def test_get_settings_is_cached(self, clean_env) -> None:
        assert get_settings() is get_settings()
